"""
Static analysis wrappers: FxCop, StyleCop and CLOC.

FxCop and StyleCop report their findings in XML; the number of findings is
passed to a callback so the build can publish it. Both tools exit nonzero
when they find violations, which only fails the build with ``fail_on_error``.
"""
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence, Union

from .process import run_tool
from .xpath import read_statistics

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def count_elements(report: PathLike, tag: str) -> int:
    """Number of ``tag`` elements anywhere in an XML report (0 if there is no report)."""
    path = Path(report)
    if not path.exists():
        logger.warning(f"Report not found: {path}")
        return 0
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        logger.warning(f"Could not parse report {path}: {e}")
        return 0
    return sum(1 for _ in root.iter(tag))


class FxCop:
    """Runs FxCopCmd against compiled assemblies."""

    @staticmethod
    def command(
        assemblies: Iterable[PathLike],
        report: PathLike,
        project: Optional[PathLike] = None,
        report_xsl: Optional[PathLike] = None,
        apply_report_xsl: bool = False,
        console_output: bool = False,
        console_xsl: Optional[PathLike] = None,
        show_summary: bool = False,
    ) -> list:
        command = []
        if project:
            command.append(f"/project:{project}")
        command.append(f"/out:{report}")
        if report_xsl:
            command.append(f"/outXsl:{report_xsl}")
            if apply_report_xsl:
                command.append("/applyoutXsl")
        if console_output:
            command.append("/console")
            if console_xsl:
                command.append(f"/consoleXsl:{console_xsl}")
        if show_summary:
            command.append("/summary")
        command += [f"/file:{assembly}" for assembly in assemblies]
        return command

    @classmethod
    def analyze(
        cls,
        tool: PathLike,
        assemblies: Iterable[PathLike],
        report: PathLike,
        project: Optional[PathLike] = None,
        report_xsl: Optional[PathLike] = None,
        apply_report_xsl: bool = False,
        console_output: bool = False,
        console_xsl: Optional[PathLike] = None,
        show_summary: bool = False,
        fail_on_error: bool = False,
        callback: Callable[[int], None] = None,
    ) -> int:
        """
        Analyze assemblies and count the reported issues.

        The issue count is read from the XML report, so it is only available
        when ``apply_report_xsl`` is off and the report stays raw XML.

        Returns:
            Number of violations
        """
        Path(report).parent.mkdir(parents=True, exist_ok=True)
        run_tool(
            tool,
            cls.command(
                assemblies,
                report,
                project,
                report_xsl,
                apply_report_xsl,
                console_output,
                console_xsl,
                show_summary,
            ),
            name="FxCop",
            check=fail_on_error,
        )

        violations = count_elements(report, "Issue")
        if callback is not None:
            callback(violations)
        return violations


class StyleCop:
    """Runs StyleCopCmd over C# source directories."""

    @staticmethod
    def command(
        directories: Sequence[PathLike],
        report: PathLike,
        settings_file: Optional[PathLike] = None,
        ignore_file_pattern: Sequence[str] = (),
        report_xsl: Optional[PathLike] = None,
    ) -> list:
        command = []
        for directory in directories:
            command += ["-d", str(directory)]
        command.append("-r")
        if settings_file:
            command += ["-sc", str(settings_file)]
        for pattern in ignore_file_pattern:
            command += ["-ifp", pattern]
        command += ["-of", str(report)]
        if report_xsl:
            command += ["-tf", str(report_xsl)]
        return command

    @classmethod
    def analyze(
        cls,
        tool: PathLike,
        directories: Union[PathLike, Sequence[PathLike]],
        report: PathLike,
        settings_file: Optional[PathLike] = None,
        ignore_file_pattern: Sequence[str] = (),
        report_xsl: Optional[PathLike] = None,
        fail_on_error: bool = False,
        callback: Callable[[int], None] = None,
    ) -> int:
        """
        Check source directories and count the reported violations.

        Returns:
            Number of violations
        """
        if isinstance(directories, (str, Path)):
            directories = [directories]
        Path(report).parent.mkdir(parents=True, exist_ok=True)
        run_tool(
            tool,
            cls.command(directories, report, settings_file, ignore_file_pattern, report_xsl),
            name="StyleCop",
            check=fail_on_error,
        )

        violations = count_elements(report, "Violation")
        if callback is not None:
            callback(violations)
        return violations


class Cloc:
    """Counts lines of code with cloc."""

    @staticmethod
    def command(search_dir: PathLike, report_file: PathLike) -> list:
        return ["--xml", "--quiet", f"--out={report_file}", str(search_dir)]

    @classmethod
    def count_loc(
        cls,
        tool: PathLike,
        search_dir: PathLike,
        report_file: PathLike,
        statistics: Mapping[str, str] = None,
        callback: Callable[[str, str], None] = None,
    ) -> Dict[str, Optional[str]]:
        """
        Count lines below ``search_dir`` and read statistics from the XML report.

        Returns:
            Statistic name mapped to its value
        """
        Path(report_file).parent.mkdir(parents=True, exist_ok=True)
        run_tool(tool, cls.command(search_dir, report_file), name="cloc")
        if not statistics:
            return {}
        return read_statistics(report_file, statistics, callback)
