"""
Process invocation for external build tools.

Every wrapped tool runs through run_tool(), which resolves the executable,
runs it synchronously with an argv list (never through a shell) and turns a
nonzero exit status into a ToolInvocationError.
"""
import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

from ..taskgraph.core import BuildError

logger = logging.getLogger(__name__)

# Exit status reported when the executable cannot be started at all
NOT_FOUND_EXIT_CODE = 127

PathLike = Union[str, Path]


class ToolInvocationError(BuildError):
    """Raised when an external tool exits with a nonzero status."""

    def __init__(self, tool: str, exit_code: int, message: str = None):
        self.tool = tool
        self.exit_code = exit_code
        super().__init__(
            message or f"{tool} failed with exit code {exit_code}"
        )


@dataclass
class ToolResult:
    """Outcome of one tool invocation."""

    tool: str
    argv: List[str]
    exit_code: int
    stdout: Optional[str] = None
    stderr: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.argv)


def resolve_executable(tool: PathLike) -> str:
    """
    Resolve a tool to an absolute path.

    Bare names (no directory part) are looked up on PATH first. Anything else,
    or a name PATH does not know, is made absolute relative to the working
    directory.
    """
    tool = str(tool)
    if os.sep not in tool and (os.altsep is None or os.altsep not in tool):
        found = shutil.which(tool)
        if found:
            return str(Path(found).absolute())
    return str(Path(tool).expanduser().absolute())


def tool_name(tool: PathLike) -> str:
    """Short display name of a tool, e.g. ``MSBuild`` for ``C:/.../MSBuild.exe``."""
    return Path(str(tool)).stem or str(tool)


def run_tool(
    tool: PathLike,
    args: Sequence[PathLike] = (),
    cwd: Optional[PathLike] = None,
    env: Optional[Mapping[str, str]] = None,
    capture: bool = False,
    name: Optional[str] = None,
    check: bool = True,
) -> ToolResult:
    """
    Run an external tool and wait for it to exit.

    Args:
        tool: Executable path or name
        args: Arguments, each passed verbatim as one argv token
        cwd: Working directory (inherited when None)
        env: Environment (inherited when None)
        capture: Capture stdout/stderr instead of streaming them
        name: Tool name used in logs and errors (defaults to the file stem)
        check: Raise ToolInvocationError on a nonzero exit status

    Returns:
        ToolResult with the exit status and any captured output

    Raises:
        ToolInvocationError: If the tool cannot be started, or exits nonzero
            while ``check`` is set
    """
    display = name or tool_name(tool)
    argv = [resolve_executable(tool)] + [str(arg) for arg in args]
    logger.info(" ".join(argv))

    try:
        completed = subprocess.run(
            argv,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            capture_output=capture,
            text=True,
        )
    except FileNotFoundError:
        raise ToolInvocationError(
            display,
            NOT_FOUND_EXIT_CODE,
            f"{display} not found: {argv[0]}",
        ) from None

    result = ToolResult(
        tool=display,
        argv=argv,
        exit_code=completed.returncode,
        stdout=completed.stdout if capture else None,
        stderr=completed.stderr if capture else None,
    )

    if result.exit_code != 0:
        if check:
            raise ToolInvocationError(display, result.exit_code)
        logger.warning(f"{display} exited with code {result.exit_code}")

    return result
