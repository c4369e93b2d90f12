"""
Clean-up tasks and the default build.
"""
import logging

from ..core.filelist import remove_paths
from ..taskgraph import TaskGraph, group, task

logger = logging.getLogger(__name__)


def register(graph: TaskGraph) -> None:
    @task(graph, "clean", description="Remove any temporary products")
    def clean(ctx):
        ctx.ensure_configured()
        removed = remove_paths(ctx.clean.resolve())
        logger.debug(f"clean removed {removed} path(s)")

    @task(graph, "clobber", depends_on=["clean"], description="Remove any generated files")
    def clobber(ctx):
        ctx.ensure_configured()
        removed = remove_paths(ctx.clobber.resolve())
        logger.debug(f"clobber removed {removed} path(s)")

    @task(graph, "quick", description="Runs a quick build just compiling the libs that are not up to date")
    def quick(ctx):
        ctx.ensure_configured()
        ctx.clobber.clear()
        ctx.quick = True

    group(graph, "default", ["clobber", "compile:all", "tests:run", "package"])
