"""
Source generation tasks: version information and configuration files.
"""
import logging

from ..core.filelist import FileList
from ..taskgraph import TaskGraph, task
from ..tools.assembly_info import AssemblyInfoBuilder
from ..tools.templates import QuickTemplate

logger = logging.getLogger(__name__)


def register(graph: TaskGraph) -> None:
    with graph.namespace("generate"):

        @task(graph, "version", description="Updates the version information for the build")
        def version(ctx):
            number = ctx.setting("build.number")
            if number is None:
                logger.info("No build number set, keeping the current version information")
                return

            AssemblyInfoBuilder(
                {"AssemblyFileVersion": number, "AssemblyVersion": number}
            ).write(ctx.path("dir.source", "VersionInfo.cs"))

        @task(graph, "config", description="Updates the configuration files for the build")
        def config(ctx):
            for template in FileList(f"{ctx.setting('dir.source')}/**/*.template"):
                QuickTemplate(template).exec(ctx.settings)
