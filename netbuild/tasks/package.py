"""
Packaging and deployment tasks.
"""
import logging
import shutil
from pathlib import Path

from ..core.filelist import FileList
from ..taskgraph import TaskGraph, task
from ..tools.msdeploy import MSDeploy
from ..tools.sevenzip import SevenZip

logger = logging.getLogger(__name__)

PACKAGED_FILES = ["**/*.dll", "**/*.pdb", "**/*.config", "**/*.boo"]


def package_files(application_dir: Path) -> list:
    """Packaged files, relative to the application output directory."""
    files = FileList(*[f"{application_dir}/{pattern}" for pattern in PACKAGED_FILES])
    files.exclude("obj")
    return [path.relative_to(application_dir) for path in files]


def register(graph: TaskGraph) -> None:
    @task(graph, "package", depends_on=["compile:app"], description="Packages the build artifacts")
    def package(ctx):
        application_dir = ctx.path("dir.build", "Application")
        archiver = SevenZip(
            tool=ctx.settings.require("tools.zip"),
            zip_name=ctx.settings.require("deployment.package"),
        )
        archiver.zip(package_files(application_dir), cwd=application_dir)

    @task(graph, "deploy", depends_on=["package"], description="Deploys the build artifacts to the QA system")
    def deploy(ctx):
        location = ctx.path("deployment.location")
        if location.exists():
            logger.info(f"rm -r {location}")
            shutil.rmtree(location)

        SevenZip(
            tool=ctx.settings.require("tools.zip"),
            zip_name=ctx.settings.require("deployment.package"),
        ).unzip(location)

    with graph.namespace("deploy"):

        @task(
            graph,
            "web",
            depends_on=["package"],
            description="Deploys the package to the web server with MSDeploy",
        )
        def web(ctx):
            settings = ctx.settings
            MSDeploy.run(
                {
                    "tool": settings.require("tools.msdeploy"),
                    "verb": "sync",
                    "source": {"package": str(Path(settings.require("deployment.package")).absolute())},
                    "dest": {
                        "auto": True,
                        "computerName": settings.require("deployment.server"),
                        "userName": settings.get("deployment.username"),
                        "password": settings.get("deployment.password"),
                    },
                    "allowUntrusted": bool(settings.get("deployment.allow_untrusted")),
                }
            )
