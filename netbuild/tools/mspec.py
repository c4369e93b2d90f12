"""
Machine.Specifications (MSpec) console runner wrapper.
"""
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from .process import ToolResult, run_tool

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Mspec:
    """Runs the specifications in a test assembly."""

    @staticmethod
    def command(
        assembly: PathLike,
        report_directory: Optional[PathLike] = None,
        teamcity: bool = False,
        args: Sequence[str] = (),
    ) -> list:
        command = []
        if teamcity:
            command.append("--teamcity")
        if report_directory:
            command += ["--html", str(report_directory)]
        command += list(args)
        command.append(str(assembly))
        return command

    @classmethod
    def run(
        cls,
        tool: PathLike,
        assembly: PathLike,
        report_directory: Optional[PathLike] = None,
        teamcity: bool = False,
        args: Sequence[str] = (),
    ) -> ToolResult:
        """
        Run one specification assembly.

        Args:
            tool: Path of mspec.exe
            assembly: Test assembly to run
            report_directory: Directory for the HTML report
            teamcity: Report results with TeamCity service messages
            args: Extra runner arguments
        """
        if report_directory:
            Path(report_directory).mkdir(parents=True, exist_ok=True)
        logger.info(f"Running specifications in {Path(assembly).name}")
        return run_tool(
            tool,
            cls.command(assembly, report_directory, teamcity, args),
            name="MSpec",
        )
