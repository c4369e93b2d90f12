"""
NCover code coverage wrappers.

``run_coverage`` profiles a test runner with NCover.Console and writes the
raw coverage XML; ``explore`` merges those files with NCoverExplorer into
HTML/XML reports and enforces a minimum coverage.
"""
import logging
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Sequence, Union

from ..core.filelist import FileList
from .process import ToolResult, run_tool
from .xpath import read_statistics

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

COVERAGE_SUFFIX = ".Coverage.xml"


class NCover:
    """NCover.Console and NCoverExplorer.Console invocations."""

    @staticmethod
    def coverage_file(report_dir: PathLike, assembly: PathLike) -> Path:
        return Path(report_dir) / f"{Path(assembly).stem}{COVERAGE_SUFFIX}"

    @classmethod
    def coverage_command(
        cls,
        program: PathLike,
        assembly: PathLike,
        report_dir: PathLike,
        application_assemblies: Sequence[str] = (),
        working_dir: Optional[PathLike] = None,
        args: Sequence[str] = (),
    ) -> list:
        command = [str(program)] + [a for a in args if a] + [str(Path(assembly).absolute())]
        if application_assemblies:
            command += ["//a", ";".join(application_assemblies)]
        command += ["//x", str(cls.coverage_file(report_dir, assembly).absolute())]
        if working_dir:
            command += ["//w", str(Path(working_dir).absolute())]
        return command

    @classmethod
    def run_coverage(
        cls,
        tool: PathLike,
        program: PathLike,
        assembly: PathLike,
        report_dir: PathLike,
        application_assemblies: Sequence[str] = (),
        working_dir: Optional[PathLike] = None,
        args: Sequence[str] = (),
    ) -> ToolResult:
        """
        Run ``program`` on ``assembly`` under NCover.

        Args:
            tool: Path of NCover.Console.exe
            program: Test runner to profile
            assembly: Test assembly passed to the runner
            report_dir: Directory receiving ``<assembly>.Coverage.xml``
            application_assemblies: Names of the assemblies to measure
            working_dir: Working directory of the profiled runner
            args: Extra runner arguments
        """
        Path(report_dir).mkdir(parents=True, exist_ok=True)
        return run_tool(
            tool,
            cls.coverage_command(
                program, assembly, report_dir, application_assemblies, working_dir, args
            ),
            cwd=working_dir,
            name="NCover",
        )

    @staticmethod
    def explore_command(
        coverage_files: Sequence[PathLike],
        project: str,
        report_dir: PathLike,
        html_report: Optional[str] = None,
        xml_report: Optional[str] = None,
        min_coverage: Optional[float] = None,
        fail_if_under_min_coverage: bool = False,
    ) -> list:
        command = [str(f) for f in coverage_files]
        command.append(f"/project:{project}")
        command.append("/report:ModuleClassFunctionSummary")
        if html_report:
            command.append(f"/html:{Path(report_dir) / html_report}")
        if xml_report:
            command.append(f"/xml:{Path(report_dir) / xml_report}")
        if min_coverage is not None:
            command.append(f"/minCoverage:{min_coverage}")
        if fail_if_under_min_coverage:
            command.append("/failMinimum")
        return command

    @classmethod
    def explore(
        cls,
        tool: PathLike,
        project: str,
        report_dir: PathLike,
        html_report: Optional[str] = "Coverage.html",
        xml_report: Optional[str] = "Coverage.xml",
        min_coverage: Optional[float] = None,
        fail_if_under_min_coverage: bool = False,
        statistics: Mapping[str, str] = None,
        callback: Callable[[str, str], None] = None,
    ) -> Dict[str, Optional[str]]:
        """
        Merge coverage files into reports and read statistics from the XML report.

        Returns:
            Statistic name mapped to its value
        """
        coverage_files = FileList(f"{report_dir}/*{COVERAGE_SUFFIX}").resolve()
        run_tool(
            tool,
            cls.explore_command(
                coverage_files,
                project,
                report_dir,
                html_report,
                xml_report,
                min_coverage,
                fail_if_under_min_coverage,
            ),
            name="NCoverExplorer",
        )

        if not statistics or not xml_report:
            return {}
        return read_statistics(Path(report_dir) / xml_report, statistics, callback)
