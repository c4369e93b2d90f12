"""
Database tasks: schema deployment, script export and sample data.
"""
import logging

from ..taskgraph import TaskGraph, task
from ..tools.database import DatabaseTool, SqlPubWiz, Tarantino

logger = logging.getLogger(__name__)

SAMPLE_DATA_SCRIPT = "Sample data.sql"


def invoke_tarantino(ctx, action: str, script=None):
    """Run a Tarantino action against the configured database."""
    settings = ctx.settings
    return Tarantino.run(
        tool=settings.require("tools.tarantino"),
        action=action,
        server=settings.require("database.server"),
        database=settings.require("database.name"),
        script_dir=script or settings.require("database.scripts"),
        sspi=bool(settings.get("database.sspi")),
        username=settings.get("database.username"),
        password=settings.get("database.password"),
    )


def _tarantino_action(action: str):
    def run(ctx):
        invoke_tarantino(ctx, action)

    run.__name__ = f"db_{action}"
    return run


def register(graph: TaskGraph) -> None:
    with graph.namespace("db"):
        for action, description in (
            ("create", "Creates the database"),
            ("update", "Updates the database"),
            ("drop", "Drops the database"),
            ("rebuild", "Rebuilds the database"),
        ):
            graph.declare(action, action=_tarantino_action(action), description=description)

        with graph.namespace("export"):

            @task(graph, "create", depends_on=["compile:dbtools"], description="Exports the create scripts")
            def export_create(ctx):
                db_tool = DatabaseTool(ctx.setting("project"), ctx.path("dir.build", "DbTool"))
                db_tool.export("create", ctx.path("dir.deploy", "0001_Create schema.sql"))

            @task(
                graph,
                "update",
                depends_on=["compile:dbtools"],
                description="Exports the update script (forward migration)",
            )
            def export_update(ctx):
                db_tool = DatabaseTool(ctx.setting("project"), ctx.path("dir.build", "DbTool"))
                db_tool.export("update", ctx.path("dir.deploy", "Update.sql"))

            @task(graph, "sample_data", description="Exports the data in the current database")
            def export_sample_data(ctx):
                SqlPubWiz.run(
                    tool=ctx.settings.require("tools.sqlpubwiz"),
                    connection_string=ctx.setting("database.connectionstring"),
                    output_file=ctx.path("database.sample_data", SAMPLE_DATA_SCRIPT),
                )

        with graph.namespace("import"):

            @task(graph, "sample_data", depends_on=["db:rebuild"], description="Imports sample data")
            def import_sample_data(ctx):
                invoke_tarantino(
                    ctx, "execute_script", ctx.path("database.sample_data", SAMPLE_DATA_SCRIPT)
                )
