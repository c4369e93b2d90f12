"""
MSBuild wrapper.

Compiles a project file with ``/p:Name=Value`` properties. In quick mode a
project is skipped when every assembly it produced is newer than every file
in its project directory.
"""
import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from ..core.filelist import FileList
from .process import ToolResult, run_tool

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def property_switch(name: str, value: Any) -> str:
    """``/p:Name=Value`` with booleans rendered the way MSBuild expects."""
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"/p:{name}={value}"


def solution_dir(source_dir: PathLike) -> str:
    """Absolute source directory with a trailing separator, as $(SolutionDir) expects."""
    return str(Path(source_dir).absolute()).rstrip("/\\") + "/"


def is_up_to_date(artifacts: Sequence[Path], sources: Iterable[Path]) -> bool:
    """
    Check whether every artifact is newer than every source file.

    An empty artifact list is never up to date.
    """
    if not artifacts:
        return False

    newest_source = max((p.stat().st_mtime for p in sources if p.is_file()), default=None)
    if newest_source is None:
        return True

    for artifact in artifacts:
        if not artifact.exists() or artifact.stat().st_mtime <= newest_source:
            return False
    return True


class MSBuild:
    """
    Compiles projects with MSBuild.

    Args:
        tool: Path or name of the MSBuild executable
        build_dir: Root of the build output (searched for artifacts)
        quick: Skip projects whose artifacts are up to date
    """

    def __init__(self, tool: PathLike = "msbuild", build_dir: PathLike = "build", quick: bool = False):
        self.tool = tool
        self.build_dir = Path(build_dir)
        self.quick = quick

    def command(
        self,
        project: PathLike,
        properties: Mapping[str, Any] = None,
        targets: Sequence[str] = (),
    ) -> List[str]:
        """Arguments for compiling one project."""
        args = [str(project), "/nologo", "/verbosity:minimal"]
        if targets:
            args.append(f"/t:{';'.join(targets)}")
        for name, value in (properties or {}).items():
            if value is None:
                continue
            args.append(property_switch(name, value))
        return args

    def artifacts_of(self, project: PathLike) -> List[Path]:
        """Assemblies in the build directory named after the project's directory."""
        name = Path(project).parent.name
        return FileList(
            f"{self.build_dir}/**/{name}.dll",
            f"{self.build_dir}/**/{name}.exe",
        ).resolve()

    def sources_of(self, project: PathLike) -> List[Path]:
        return FileList(f"{Path(project).parent}/**/*.*").resolve()

    def compile(
        self,
        project: PathLike,
        properties: Mapping[str, Any] = None,
        targets: Sequence[str] = (),
        cwd: Optional[PathLike] = None,
    ) -> Optional[ToolResult]:
        """
        Compile a project.

        Returns:
            The ToolResult, or None when quick mode skipped the project
        """
        if self.quick and is_up_to_date(self.artifacts_of(project), self.sources_of(project)):
            logger.info(f"Skipping {Path(project).name}: build output is up to date")
            return None

        return run_tool(
            self.tool, self.command(project, properties, targets), cwd=cwd, name="MSBuild"
        )
