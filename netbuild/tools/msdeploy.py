"""
MSDeploy (Web Deploy) wrapper.

MSDeploy takes ``-verb:sync -source:package=app.zip -dest:auto,computerName=web01``
style switches, so its options are given as an Option Map and rendered by
the switch renderer.
"""
import logging
from typing import Any, Mapping, Optional

from .process import ToolResult, run_tool
from .switches import split_tool, switch_tokens

logger = logging.getLogger(__name__)


class MSDeploy:
    """Runs msdeploy.exe with switches rendered from an option map."""

    @staticmethod
    def command(options: Mapping[str, Any]) -> list:
        """The argument list (without the executable) for an option map."""
        _, switches = split_tool(options)
        return switch_tokens(switches)

    @classmethod
    def run(cls, options: Mapping[str, Any], cwd: Optional[str] = None) -> ToolResult:
        """
        Run msdeploy.

        Args:
            options: Option map; the ``tool`` entry names the executable and
                every other entry becomes a switch, in insertion order
            cwd: Working directory for the tool

        Returns:
            The ToolResult of the invocation
        """
        tool, switches = split_tool(options)
        return run_tool(tool, switch_tokens(switches), cwd=cwd, name="MSDeploy")
