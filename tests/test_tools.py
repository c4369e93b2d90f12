"""
Tests for the external tool wrappers.

Tools are not installed on test machines, so run_tool is patched and the
assembled arguments are checked.
"""
import io
import os
import time
import xml.etree.ElementTree as ET
from pathlib import Path
from unittest.mock import patch

import pytest

from netbuild.core.config import Config, ConfigError
from netbuild.tools.analysis import Cloc, FxCop, StyleCop, count_elements
from netbuild.tools.assembly_info import AssemblyInfoBuilder
from netbuild.tools.database import DatabaseTool, SqlPubWiz, Tarantino
from netbuild.tools.msbuild import MSBuild, is_up_to_date, property_switch
from netbuild.tools.msdeploy import MSDeploy
from netbuild.tools.mspec import Mspec
from netbuild.tools.ncover import NCover
from netbuild.tools.sevenzip import SevenZip
from netbuild.tools.teamcity import TeamCity, escape_value
from netbuild.tools.templates import QuickTemplate
from netbuild.tools.xpath import read_statistics, select_attribute

CLOC_REPORT = """\
<?xml version="1.0"?>
<results>
  <languages>
    <language name="C#" files_count="12" blank="40" comment="10" code="1234"/>
    <language name="XML" files_count="3" blank="0" comment="0" code="90"/>
    <total sum_files="15" blank="40" comment="10" code="1324"/>
  </languages>
</results>
"""


def touch(path: Path, text: str = "", mtime: float = None):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


class TestMSBuild:
    """Tests for the MSBuild wrapper."""

    def test_command(self):
        """Test project, targets and properties are rendered in order."""
        args = MSBuild().command(
            "App.csproj",
            {"Configuration": "Release", "TreatWarningsAsErrors": True, "Unset": None},
            targets=["Clean", "Build"],
        )
        assert args == [
            "App.csproj",
            "/nologo",
            "/verbosity:minimal",
            "/t:Clean;Build",
            "/p:Configuration=Release",
            "/p:TreatWarningsAsErrors=true",
        ]

    def test_property_switch(self):
        """Test booleans are lower-cased."""
        assert property_switch("Optimize", False) == "/p:Optimize=false"

    def test_quick_mode_skips_up_to_date_project(self, tmp_path):
        """Test quick mode skips a project whose assembly is newer than its sources."""
        now = time.time()
        project = touch(tmp_path / "source" / "Shop" / "Shop.csproj", mtime=now - 100)
        touch(tmp_path / "source" / "Shop" / "Program.cs", mtime=now - 100)
        touch(tmp_path / "build" / "Application" / "Shop.dll", mtime=now)

        with patch("netbuild.tools.msbuild.run_tool") as mock_run:
            result = MSBuild(build_dir=tmp_path / "build", quick=True).compile(project)

        assert result is None
        mock_run.assert_not_called()

    def test_quick_mode_compiles_changed_project(self, tmp_path):
        """Test quick mode compiles when a source is newer than the assembly."""
        now = time.time()
        project = touch(tmp_path / "source" / "Shop" / "Shop.csproj", mtime=now - 100)
        touch(tmp_path / "source" / "Shop" / "Program.cs", mtime=now)
        touch(tmp_path / "build" / "Application" / "Shop.dll", mtime=now - 50)

        with patch("netbuild.tools.msbuild.run_tool") as mock_run:
            MSBuild(tool="msbuild", build_dir=tmp_path / "build", quick=True).compile(project)

        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == "msbuild"

    def test_without_artifacts_not_up_to_date(self, tmp_path):
        """Test a project that was never built is not up to date."""
        assert not is_up_to_date([], [touch(tmp_path / "a.cs")])


class TestMSDeploy:
    """Tests for the MSDeploy wrapper."""

    OPTIONS = {
        "tool": "msdeploy",
        "verb": "sync",
        "source": {"package": "deploy/Shop.zip"},
        "dest": {"auto": True, "computerName": "web01", "userName": None},
        "allowUntrusted": False,
    }

    def test_command(self):
        """Test the option map becomes switch tokens."""
        assert MSDeploy.command(self.OPTIONS) == [
            "-verb:sync",
            "-source:package=deploy/Shop.zip",
            "-dest:auto,computerName=web01",
        ]

    def test_run(self):
        """Test the tool entry names the executable."""
        with patch("netbuild.tools.msdeploy.run_tool") as mock_run:
            MSDeploy.run(self.OPTIONS)

        args, kwargs = mock_run.call_args
        assert args[0] == "msdeploy"
        assert args[1][0] == "-verb:sync"
        assert kwargs["name"] == "MSDeploy"


class TestTestRunners:
    """Tests for the MSpec and NCover wrappers."""

    def test_mspec_command(self):
        """Test the runner arguments with TeamCity output."""
        assert Mspec.command("Shop.Tests.dll", "results", teamcity=True) == [
            "--teamcity",
            "--html",
            "results",
            "Shop.Tests.dll",
        ]

    def test_ncover_coverage_command(self, tmp_path):
        """Test NCover profiles the runner over the application assemblies."""
        assembly = tmp_path / "Shop.Tests.dll"
        command = NCover.coverage_command(
            "mspec.exe", assembly, tmp_path / "results", ["Shop", "Shop.Core"], tmp_path
        )
        assert command[0] == "mspec.exe"
        assert command[1] == str(assembly)
        assert command[2:4] == ["//a", "Shop;Shop.Core"]
        assert command[4] == "//x"
        assert command[5].endswith("Shop.Tests.Coverage.xml")
        assert command[6:] == ["//w", str(tmp_path)]

    def test_ncover_explore_command(self):
        """Test the explorer enforces the minimum coverage."""
        command = NCover.explore_command(
            ["a.Coverage.xml"], "Shop", "results", None, "Coverage.xml", 70, True
        )
        assert command == [
            "a.Coverage.xml",
            "/project:Shop",
            "/report:ModuleClassFunctionSummary",
            f"/xml:{Path('results') / 'Coverage.xml'}",
            "/minCoverage:70",
            "/failMinimum",
        ]

    def test_ncover_explore_reads_statistics(self, tmp_path):
        """Test coverage statistics are read from the XML report."""
        touch(
            tmp_path / "Coverage.xml",
            '<coverageReport><project functionCoverage="81.5"/></coverageReport>',
        )
        published = []
        with patch("netbuild.tools.ncover.run_tool"):
            results = NCover.explore(
                "explorer.exe",
                "Shop",
                tmp_path,
                statistics={"NCoverCodeCoverage": "/coverageReport/project/@functionCoverage"},
                callback=lambda key, value: published.append((key, value)),
            )

        assert results == {"NCoverCodeCoverage": "81.5"}
        assert published == [("NCoverCodeCoverage", "81.5")]


class TestAnalysis:
    """Tests for FxCop, StyleCop and CLOC."""

    def test_fxcop_counts_issues(self, tmp_path):
        """Test FxCop issues are counted from the report and passed to the callback."""
        report = touch(
            tmp_path / "FxCop.xml",
            "<FxCopReport><Messages><Message><Issue/><Issue/></Message></Messages></FxCopReport>",
        )
        counts = []
        with patch("netbuild.tools.analysis.run_tool") as mock_run:
            violations = FxCop.analyze(
                "FxCopCmd.exe", ["Shop.dll"], report, project="Settings.FxCop", callback=counts.append
            )

        assert violations == 2
        assert counts == [2]
        args, kwargs = mock_run.call_args
        assert args[1] == ["/project:Settings.FxCop", f"/out:{report}", "/file:Shop.dll"]
        assert kwargs["check"] is False

    def test_stylecop_command(self):
        """Test StyleCop arguments for directories and ignore patterns."""
        command = StyleCop.command(
            ["source/app"], "StyleCop.xml", "Settings.StyleCop", [r"\.Designer\.cs$"]
        )
        assert command == [
            "-d", "source/app",
            "-r",
            "-sc", "Settings.StyleCop",
            "-ifp", r"\.Designer\.cs$",
            "-of", "StyleCop.xml",
        ]

    def test_missing_report_counts_zero(self, tmp_path):
        """Test a missing report counts as no violations."""
        assert count_elements(tmp_path / "missing.xml", "Violation") == 0

    def test_cloc_statistics(self, tmp_path):
        """Test line counts are read from the cloc report."""
        report = touch(tmp_path / "cloc.xml", CLOC_REPORT)
        with patch("netbuild.tools.analysis.run_tool") as mock_run:
            results = Cloc.count_loc(
                "cloc",
                "source",
                report,
                {
                    "LOC.CS": "/results/languages/language[@name='C#']/@code",
                    "Files.Total": "/results/languages/total/@sum_files",
                },
            )

        assert results == {"LOC.CS": "1234", "Files.Total": "15"}
        assert mock_run.call_args[0][1] == ["--xml", "--quiet", f"--out={report}", "source"]


class TestXPath:
    """Tests for attribute expressions."""

    def test_select_attribute(self):
        """Test predicates and the trailing attribute step."""
        root = ET.fromstring(CLOC_REPORT.split("\n", 1)[1])
        assert select_attribute(root, "/results/languages/language[@name='XML']/@code") == "90"
        assert select_attribute(root, "/results/languages/language[@name='F#']/@code") is None
        assert select_attribute(root, "/other/languages/@code") is None

    def test_unsupported_expression(self):
        """Test element-only expressions are rejected."""
        with pytest.raises(ValueError):
            select_attribute(ET.Element("results"), "/results/languages")

    def test_read_statistics_missing_value(self, tmp_path):
        """Test values that are not found are None and not published."""
        report = touch(tmp_path / "cloc.xml", CLOC_REPORT)
        published = []
        results = read_statistics(
            report,
            {"LOC.FS": "/results/languages/language[@name='F#']/@code"},
            lambda key, value: published.append(key),
        )
        assert results == {"LOC.FS": None}
        assert published == []


class TestDatabaseTools:
    """Tests for Tarantino, SqlPubWiz and the schema export tool."""

    def test_tarantino_integrated_security(self):
        """Test the action verb and connection arguments."""
        assert Tarantino.command("rebuild", "localhost", "shop", "source/database") == [
            "Rebuild",
            "localhost",
            "shop",
            "source/database",
        ]

    def test_tarantino_sql_login(self):
        """Test credentials are appended without integrated security."""
        command = Tarantino.command("update", "sql01", "shop", "db", sspi=False, username="sa", password="pw")
        assert command[-2:] == ["sa", "pw"]

    def test_tarantino_validation(self):
        """Test unknown actions and missing usernames are rejected."""
        with pytest.raises(ValueError, match="Unknown database action"):
            Tarantino.command("migrate", "localhost", "shop", "db")
        with pytest.raises(ValueError, match="username"):
            Tarantino.command("create", "localhost", "shop", "db", sspi=False)

    def test_sqlpubwiz_command(self):
        """Test the data-only export arguments."""
        assert SqlPubWiz.command("Data Source=x;", "data.sql") == [
            "script", "-C", "Data Source=x;", "data.sql", "-dataonly", "-f",
        ]

    def test_database_tool_export(self, tmp_path):
        """Test the schema export runs from the tool directory."""
        tool = DatabaseTool("Shop", tmp_path / "DbTool")
        output = tmp_path / "deploy" / "Update.sql"
        with patch("netbuild.tools.database.run_tool") as mock_run:
            tool.export("update", output)

        args, kwargs = mock_run.call_args
        assert args[0] == (tmp_path / "DbTool" / "Shop.Tools.Database.exe").absolute()
        assert args[1] == ["/Operation:ExportUpdate", f"/OutputFile:{output.absolute()}"]
        assert kwargs["cwd"] == tmp_path / "DbTool"
        assert output.parent.is_dir()


class TestSevenZip:
    """Tests for the 7-Zip wrapper."""

    def test_zip(self, tmp_path):
        """Test files are added relative to the working directory."""
        archiver = SevenZip("7z", tmp_path / "deploy" / "Shop.zip")
        with patch("netbuild.tools.sevenzip.run_tool") as mock_run:
            archiver.zip([Path("Shop.dll"), "Shop.pdb"], cwd=tmp_path / "build")

        args, kwargs = mock_run.call_args
        assert args == ("7z", ["a", "-tzip", str(tmp_path / "deploy" / "Shop.zip"), "Shop.dll", "Shop.pdb"])
        assert kwargs["cwd"] == tmp_path / "build"

    def test_unzip(self):
        """Test extraction overwrites into the destination."""
        with patch("netbuild.tools.sevenzip.run_tool") as mock_run:
            SevenZip("7z", "Shop.zip").unzip("site")
        assert mock_run.call_args[0][1] == ["x", "-y", "-osite", "Shop.zip"]


class TestGeneratedFiles:
    """Tests for VersionInfo.cs and configuration templates."""

    def test_assembly_info(self, tmp_path):
        """Test version attributes are written as C# attributes."""
        path = AssemblyInfoBuilder(
            {"AssemblyVersion": "1.2.3.4", "AssemblyFileVersion": "1.2.3.4", "Skipped": None}
        ).write(tmp_path / "VersionInfo.cs")

        text = path.read_text()
        assert "<auto-generated>" in text
        assert "using System.Reflection;" in text
        assert '[assembly: AssemblyVersion("1.2.3.4")]' in text
        assert "Skipped" not in text

    def test_template_rendered(self, tmp_path):
        """Test dotted placeholders are replaced with settings."""
        config = Config(tmp_path, environ={}).load("development")
        template = touch(
            tmp_path / "App.config.template",
            '<add key="db" value="{{ database.connectionstring }}" /> <!-- $5 {{ project }} -->\n',
        )

        output = QuickTemplate(template).exec(config)

        assert output == tmp_path / "App.config"
        assert output.read_text() == (
            '<add key="db" value="Data Source=localhost; Initial Catalog=None; '
            'Integrated Security=true; Persist Security Info=False;" /> <!-- $5 Application -->\n'
        )

    def test_template_undefined_setting(self, tmp_path):
        """Test an unknown setting is a configuration error."""
        config = Config(tmp_path, environ={}).load("development")
        template = touch(tmp_path / "App.config.template", "{{ database.no_such_setting }}")
        with pytest.raises(ConfigError, match="no_such_setting"):
            QuickTemplate(template).render(config)

    def test_template_undefined_section(self, tmp_path):
        """Test an unknown top-level setting is a configuration error."""
        config = Config(tmp_path, environ={}).load("development")
        template = touch(tmp_path / "App.config.template", "{{ nosuch.setting }}")
        with pytest.raises(ConfigError, match="undefined"):
            QuickTemplate(template).render(config)

    def test_template_syntax_error(self, tmp_path):
        """Test a malformed template is a configuration error."""
        config = Config(tmp_path, environ={}).load("development")
        template = touch(tmp_path / "App.config.template", "{{ project ")
        with pytest.raises(ConfigError, match="Invalid template"):
            QuickTemplate(template).render(config)


class TestTeamCity:
    """Tests for TeamCity reporting."""

    def test_statistic_published(self, tmp_path):
        """Test statistics go to stdout and teamcity-info.xml."""
        stream = io.StringIO()
        info = tmp_path / "teamcity-info.xml"
        teamcity = TeamCity(enabled=True, info_file=info, stream=stream)

        teamcity.add_statistic("LOC.CS", 1234)
        teamcity.append_build_status_text("1234 LOC in 12 C# Files")

        assert "##teamcity[buildStatisticValue key='LOC.CS' value='1234']" in stream.getvalue()
        root = ET.parse(info).getroot()
        assert root.find("statisticValue").get("value") == "1234"
        assert root.find("statusInfo/text").text.strip() == "1234 LOC in 12 C# Files"

    def test_disabled_only_logs(self, tmp_path):
        """Test nothing is written outside TeamCity."""
        stream = io.StringIO()
        info = tmp_path / "teamcity-info.xml"
        TeamCity(enabled=False, info_file=info, stream=stream).add_statistic("LOC", 1)
        assert stream.getvalue() == ""
        assert not info.exists()

    def test_escape_value(self):
        """Test service message escaping."""
        assert escape_value("it's [x]|y") == "it|'s |[x|]||y"
