"""
Test and code quality tasks: specifications, coverage and static analysis.
"""
import logging
import re

from ..core.filelist import FileList
from ..taskgraph import TaskGraph, group, task
from ..tools.analysis import Cloc, FxCop, StyleCop
from ..tools.mspec import Mspec
from ..tools.ncover import NCover

logger = logging.getLogger(__name__)

CLOC_STATISTICS = {
    "LOC.CS": "/results/languages/language[@name='C#']/@code",
    "Files.CS": "/results/languages/language[@name='C#']/@files_count",
    "LOC.Total": "/results/languages/total/@code",
    "Files.Total": "/results/languages/total/@sum_files",
}

COVERAGE_STATISTICS = {
    "NCoverCodeCoverage": "/coverageReport/project/@functionCoverage",
}

STYLECOP_IGNORED_FILES = [
    r"(?:Version|Solution|Assembly|FxCop)Info\.cs$",
    r"\.Designer\.cs$",
    r"\.hbm\.cs$",
    r"QueryBuilder\.cs$",
]


def spec_assemblies(ctx) -> FileList:
    return FileList(f"{ctx.setting('dir.build')}/Test/**/*.Tests.dll")


def application_assemblies(ctx) -> list:
    """Names of the project's own assemblies copied next to the tests."""
    test_dir = f"{ctx.setting('dir.build')}/Test"
    project = ctx.setting("project")
    return (
        FileList(f"{test_dir}/**/{project}*.dll", f"{test_dir}/**/{project}*.exe")
        .exclude(re.compile(r"(Tests\.dll$)|(ForTesting\.dll$)"))
        .exclude(re.compile(r"\.exe$"))
        .names()
    )


def register(graph: TaskGraph) -> None:
    with graph.namespace("tests"):

        @task(graph, "run", depends_on=["compile:tests", "db:rebuild"], description="Runs unit tests")
        def run(ctx):
            for assembly in spec_assemblies(ctx):
                Mspec.run(
                    tool=ctx.settings.require("tools.mspec"),
                    assembly=assembly,
                    report_directory=ctx.setting("dir.test_results"),
                    teamcity=ctx.teamcity.enabled,
                )

        @task(graph, "cloc", description="Runs CLOC to create some source code statistics")
        def cloc(ctx):
            results = Cloc.count_loc(
                tool=ctx.settings.require("tools.cloc"),
                search_dir=ctx.setting("dir.source"),
                report_file=ctx.path("dir.test_results", "cloc.xml"),
                statistics=CLOC_STATISTICS,
                callback=ctx.teamcity.add_statistic,
            )
            ctx.teamcity.append_build_status_text(
                f"{results.get('LOC.CS')} LOC in {results.get('Files.CS')} C# Files"
            )

        @task(
            graph,
            "ncover",
            depends_on=["compile:tests", "db:rebuild"],
            description="Runs NCover code coverage",
        )
        def ncover(ctx):
            settings = ctx.settings
            report_dir = ctx.setting("dir.test_results")
            covered = application_assemblies(ctx)
            runner_args = ["--teamcity"] if ctx.teamcity.enabled else []

            for assembly in spec_assemblies(ctx):
                NCover.run_coverage(
                    tool=settings.require("tools.ncover"),
                    program=settings.require("tools.mspec"),
                    assembly=assembly,
                    report_dir=report_dir,
                    application_assemblies=covered,
                    working_dir=assembly.parent,
                    args=runner_args,
                )

            def publish(key, value):
                ctx.teamcity.add_statistic(key, value)
                ctx.teamcity.append_build_status_text(f"Code coverage: {round(float(value))}%")

            NCover.explore(
                tool=settings.require("tools.ncoverexplorer"),
                project=settings.require("project"),
                report_dir=report_dir,
                html_report="Coverage.html",
                xml_report="Coverage.xml",
                min_coverage=settings.get("quality.min_coverage"),
                fail_if_under_min_coverage=True,
                statistics=COVERAGE_STATISTICS,
                callback=publish,
            )

        @task(
            graph,
            "fxcop",
            depends_on=["clean", "compile:app"],
            description="Runs FxCop to analyze assemblies for compliance with the coding guidelines",
        )
        def fxcop(ctx):
            tool = ctx.path("tools.fxcop")

            def publish(violations):
                ctx.teamcity.append_build_status_text(f"{violations} FxCop violation(s)")
                ctx.teamcity.add_statistic("FxCopViolations", violations)

            FxCop.analyze(
                tool=tool,
                assemblies=FileList(
                    f"{ctx.setting('dir.build')}/Application/**/{ctx.setting('project')}*.dll"
                ).exclude("**/*.vshost"),
                report=ctx.path("dir.test_results", "FxCop.xml"),
                project=ctx.path("dir.source", "Settings.FxCop"),
                report_xsl=tool.parent / "Xml" / "CustomFxCopReport.xsl",
                console_output=True,
                console_xsl=tool.parent / "Xml" / "FxCopRichConsoleOutput.xsl",
                show_summary=True,
                fail_on_error=False,
                callback=publish,
            )

        @task(
            graph,
            "stylecop",
            description="Runs StyleCop to analyze C# source code for compliance with the coding guidelines",
        )
        def stylecop(ctx):
            tool = ctx.path("tools.stylecop")

            def publish(violations):
                ctx.teamcity.append_build_status_text(f"{violations} StyleCop violation(s)")
                ctx.teamcity.add_statistic("StyleCopViolations", violations)

            StyleCop.analyze(
                tool=tool,
                directories=ctx.setting("dir.app"),
                report=ctx.path("dir.test_results", "StyleCop.xml"),
                settings_file=ctx.path("dir.source", "Settings.StyleCop"),
                ignore_file_pattern=STYLECOP_IGNORED_FILES,
                report_xsl=tool.parent / "StyleCopReport.xsl",
                fail_on_error=False,
                callback=publish,
            )

        group(
            graph,
            "quality",
            ["ncover", "cloc", "fxcop", "stylecop"],
            "Run all code quality-related tasks",
        )
