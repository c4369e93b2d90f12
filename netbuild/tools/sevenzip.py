"""
7-Zip archiver wrapper.
"""
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .process import ToolResult, run_tool

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class SevenZip:
    """Creates and extracts zip archives with 7z."""

    def __init__(self, tool: PathLike = "7z", zip_name: Optional[PathLike] = None):
        self.tool = tool
        self.zip_name = zip_name

    def zip(self, files: Iterable[PathLike], cwd: Optional[PathLike] = None) -> ToolResult:
        """
        Add files to the archive.

        File paths are passed as given, so they are stored relative to ``cwd``.
        The archive path is made absolute first so it does not depend on ``cwd``.
        """
        archive = Path(self.zip_name).absolute()
        archive.parent.mkdir(parents=True, exist_ok=True)
        files = [str(f) for f in files]
        logger.info(f"Packaging {len(files)} file(s) into {archive}")
        return run_tool(self.tool, ["a", "-tzip", str(archive)] + files, cwd=cwd, name="7-Zip")

    def unzip(self, destination: PathLike) -> ToolResult:
        """Extract the archive into ``destination``, overwriting existing files."""
        return run_tool(
            self.tool,
            ["x", "-y", f"-o{destination}", str(self.zip_name)],
            name="7-Zip",
        )
