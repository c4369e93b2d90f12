"""
Compilation tasks.
"""
import logging

from ..core.filelist import FileList
from ..taskgraph import TaskGraph, group, task
from ..tools.msbuild import MSBuild, solution_dir

logger = logging.getLogger(__name__)

PREREQUISITES = ["clobber", "generate:version", "generate:config"]


def msbuild(ctx) -> MSBuild:
    """An MSBuild wrapper honouring the run's quick mode."""
    return MSBuild(
        tool=ctx.settings.require("tools.msbuild"),
        build_dir=ctx.setting("dir.build"),
        quick=ctx.quick,
    )


def compile_projects(ctx, projects: FileList, treat_warnings_as_errors: bool = False) -> int:
    """
    Compile every project in a file list.

    Returns:
        Number of projects found
    """
    compiler = msbuild(ctx)
    properties = {
        "SolutionDir": solution_dir(ctx.setting("dir.source")),
        "Configuration": ctx.setting("build.configuration"),
    }
    if treat_warnings_as_errors:
        properties["TreatWarningsAsErrors"] = True

    found = projects.resolve()
    if not found:
        logger.warning(f"No projects match {projects.patterns}")
    for project in found:
        compiler.compile(project, properties)
    return len(found)


def register(graph: TaskGraph) -> None:
    with graph.namespace("compile"):

        @task(graph, "app", depends_on=PREREQUISITES, description="Compiles the application")
        def app(ctx):
            app_dir = ctx.setting("dir.app")
            compile_projects(
                ctx,
                FileList(f"{app_dir}/**/*.Application.csproj", f"{app_dir}/**/*.Modules.*.csproj"),
                treat_warnings_as_errors=True,
            )

        @task(graph, "tests", depends_on=PREREQUISITES, description="Compiles the tests")
        def tests(ctx):
            compile_projects(ctx, FileList(f"{ctx.setting('dir.test')}/**/*.csproj"))

        @task(graph, "dbtools", depends_on=PREREQUISITES, description="Compiles the database tools")
        def dbtools(ctx):
            name = f"{ctx.setting('project')}.Tools.Database"
            compile_projects(
                ctx,
                FileList(f"{ctx.setting('dir.app')}/{name}/{name}.csproj"),
                treat_warnings_as_errors=True,
            )

        group(graph, "all", ["app", "tests", "dbtools"])
