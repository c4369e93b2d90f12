"""
External tool wrappers.

Each wrapper assembles the argument list for one tool and runs it through
run_tool(), the single process-invocation primitive.
"""

from .analysis import Cloc, FxCop, StyleCop
from .assembly_info import AssemblyInfoBuilder
from .database import DatabaseTool, SqlPubWiz, Tarantino
from .msbuild import MSBuild
from .msdeploy import MSDeploy
from .mspec import Mspec
from .ncover import NCover
from .process import ToolInvocationError, ToolResult, run_tool
from .sevenzip import SevenZip
from .switches import Flag, Nested, Scalar, render_switches
from .teamcity import TeamCity
from .templates import QuickTemplate

__all__ = [
    "AssemblyInfoBuilder",
    "Cloc",
    "DatabaseTool",
    "Flag",
    "FxCop",
    "MSBuild",
    "MSDeploy",
    "Mspec",
    "NCover",
    "Nested",
    "QuickTemplate",
    "Scalar",
    "SevenZip",
    "SqlPubWiz",
    "StyleCop",
    "Tarantino",
    "TeamCity",
    "ToolInvocationError",
    "ToolResult",
    "render_switches",
    "run_tool",
]
