"""
Tests for running external tools.
"""
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from netbuild.tools.process import (
    NOT_FOUND_EXIT_CODE,
    ToolInvocationError,
    resolve_executable,
    run_tool,
    tool_name,
)


class TestRunTool:
    """Tests for run_tool with real child processes."""

    def test_success(self):
        """Test a zero exit status returns a successful result."""
        result = run_tool(sys.executable, ["-c", "pass"])
        assert result.success
        assert result.exit_code == 0

    def test_nonzero_exit_raises(self):
        """Test a nonzero exit status raises with the status."""
        with pytest.raises(ToolInvocationError) as exc_info:
            run_tool(sys.executable, ["-c", "import sys; sys.exit(3)"], name="Compiler")

        assert exc_info.value.exit_code == 3
        assert exc_info.value.tool == "Compiler"
        assert "Compiler failed with exit code 3" in str(exc_info.value)

    def test_unchecked_exit(self):
        """Test check=False returns the failing result instead of raising."""
        result = run_tool(sys.executable, ["-c", "import sys; sys.exit(2)"], check=False)
        assert not result.success
        assert result.exit_code == 2

    def test_capture_output(self):
        """Test captured output is returned."""
        result = run_tool(sys.executable, ["-c", "print('hello')"], capture=True)
        assert result.stdout.strip() == "hello"

    def test_arguments_passed_verbatim(self):
        """Test an argument with spaces and quotes arrives as one token."""
        value = 'package="C:/My Site/app.zip"'
        result = run_tool(
            sys.executable, ["-c", "import sys; print(sys.argv[1])", value], capture=True
        )
        assert result.stdout.strip() == value

    def test_working_directory(self, tmp_path):
        """Test the tool runs in the given directory."""
        result = run_tool(
            sys.executable, ["-c", "import os; print(os.getcwd())"], cwd=tmp_path, capture=True
        )
        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    def test_missing_tool(self):
        """Test a tool that cannot be started reports exit code 127."""
        with pytest.raises(ToolInvocationError) as exc_info:
            run_tool("netbuild-no-such-tool-xyz")
        assert exc_info.value.exit_code == NOT_FOUND_EXIT_CODE

    def test_argv_list_without_shell(self):
        """Test the resolved tool and arguments are passed as an argv list."""
        with patch("netbuild.tools.process.subprocess.run") as mock_run:
            mock_run.return_value.returncode = 0
            result = run_tool(sys.executable, ["-verb:sync", "-dest:auto"])

        argv = mock_run.call_args[0][0]
        assert argv[1:] == ["-verb:sync", "-dest:auto"]
        assert "shell" not in mock_run.call_args[1]
        assert result.command_line == " ".join(argv)


class TestResolveExecutable:
    """Tests for executable resolution."""

    def test_relative_path_made_absolute(self, tmp_path, monkeypatch):
        """Test a relative path resolves against the working directory."""
        monkeypatch.chdir(tmp_path)
        assert resolve_executable("tools/mspec.exe") == str(tmp_path / "tools" / "mspec.exe")

    def test_tool_name(self):
        """Test display names are the file stem."""
        assert tool_name("C:/tools/MSBuild.exe") == "MSBuild"
        assert tool_name("tools/mspec/mspec.exe") == "mspec"
