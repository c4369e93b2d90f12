"""
Database tool wrappers.

- Tarantino's DatabaseDeployer creates, migrates, drops and rebuilds the
  schema from numbered SQL scripts, and can execute a single script
- SqlPubWiz scripts out the data of an existing database
- The application's own database tool exports schema scripts
"""
import logging
from pathlib import Path
from typing import Optional, Union

from .process import ToolResult, run_tool

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

TARANTINO_ACTIONS = {
    "create": "Create",
    "update": "Update",
    "drop": "Drop",
    "rebuild": "Rebuild",
    "execute_script": "ExecuteScript",
}


class Tarantino:
    """Runs DatabaseDeployer.exe."""

    @staticmethod
    def command(
        action: str,
        server: str,
        database: str,
        script_dir: PathLike,
        sspi: bool = True,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> list:
        try:
            verb = TARANTINO_ACTIONS[action]
        except KeyError:
            raise ValueError(
                f"Unknown database action '{action}'. "
                f"Available actions: {', '.join(TARANTINO_ACTIONS)}"
            ) from None

        command = [verb, str(server), str(database), str(script_dir)]
        if not sspi:
            if not username:
                raise ValueError("A username is required when not using integrated security")
            command += [str(username), str(password or "")]
        return command

    @classmethod
    def run(
        cls,
        tool: PathLike,
        action: str,
        server: str,
        database: str,
        script_dir: PathLike,
        sspi: bool = True,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> ToolResult:
        """
        Run a database action.

        Args:
            tool: Path of DatabaseDeployer.exe
            action: One of create, update, drop, rebuild, execute_script
            server: Database server
            database: Database name
            script_dir: Script directory (or the script for execute_script)
            sspi: Use integrated security instead of username/password
        """
        logger.info(f"Database {action}: {database} on {server}")
        return run_tool(
            tool,
            cls.command(action, server, database, script_dir, sspi, username, password),
            name="Tarantino",
        )


class SqlPubWiz:
    """Runs the SQL Server Database Publishing Wizard."""

    @staticmethod
    def command(connection_string: str, output_file: PathLike) -> list:
        return ["script", "-C", connection_string, str(output_file), "-dataonly", "-f"]

    @classmethod
    def run(cls, tool: PathLike, connection_string: str, output_file: PathLike) -> ToolResult:
        """Script the data of a database into ``output_file``."""
        Path(output_file).parent.mkdir(parents=True, exist_ok=True)
        return run_tool(tool, cls.command(connection_string, output_file), name="SqlPubWiz")


class DatabaseTool:
    """
    The application's ``<project>.Tools.Database.exe`` schema exporter.

    It is built by ``compile:dbtools`` and runs from its output directory.
    """

    OPERATIONS = {"create": "ExportCreate", "update": "ExportUpdate"}

    def __init__(self, project: str, directory: PathLike):
        self.project = project
        self.directory = Path(directory)

    @property
    def executable(self) -> Path:
        return self.directory / f"{self.project}.Tools.Database.exe"

    def command(self, operation: str, output_file: PathLike) -> list:
        return [
            f"/Operation:{self.OPERATIONS[operation]}",
            f"/OutputFile:{Path(output_file).absolute()}",
        ]

    def export(self, operation: str, output_file: PathLike) -> ToolResult:
        """Export the schema script for ``operation`` (create or update)."""
        output = Path(output_file).absolute()
        output.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Exporting the schema {operation} script to {output}")
        return run_tool(
            self.executable.absolute(),
            self.command(operation, output),
            cwd=self.directory,
            name=self.executable.stem,
        )
