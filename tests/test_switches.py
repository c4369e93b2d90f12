"""
Tests for option map rendering.
"""
import pytest

from netbuild.tools.switches import (
    Flag,
    Nested,
    Scalar,
    option_value,
    render_switch,
    render_switches,
    split_tool,
    switch_tokens,
)


class TestRenderSwitches:
    """Tests for render_switches."""

    def test_scalar_flag_and_nested(self):
        """Test the three value kinds render in insertion order."""
        options = {
            "tool": "msdeploy",
            "Configuration": "Release",
            "TreatWarningsAsErrors": True,
            "Props": {"A": "1", "B": True},
        }
        assert render_switches(options) == "-Configuration:Release -TreatWarningsAsErrors -Props:A=1,B"

    def test_falsy_values_emit_nothing(self):
        """Test False, None and empty strings are omitted."""
        options = {"a": False, "b": None, "c": "", "d": "x"}
        assert render_switches(options) == "-d:x"

    def test_falsy_nested_entries_omitted(self):
        """Test falsy entries inside a nested map are dropped."""
        options = {"dest": {"auto": True, "computerName": "web01", "userName": None, "skip": False}}
        assert render_switches(options) == "-dest:auto,computerName=web01"

    def test_zero_is_a_value(self):
        """Test numeric zero renders as a scalar."""
        assert render_switches({"retryAttempts": 0}) == "-retryAttempts:0"

    def test_values_not_escaped(self):
        """Test values are passed through verbatim."""
        assert render_switch("source", "package=C:/My Site/app.zip") == "-source:package=C:/My Site/app.zip"

    def test_tagged_values_accepted(self):
        """Test explicit tagged values render like plain ones."""
        options = {
            "verb": Scalar("sync"),
            "whatif": Flag(True),
            "quiet": Flag(False),
            "dest": Nested((("auto", Flag(True)), ("computerName", Scalar("web01")))),
        }
        assert switch_tokens(options) == ["-verb:sync", "-whatif", "-dest:auto,computerName=web01"]

    def test_deterministic(self):
        """Test rendering the same map twice gives the same string."""
        options = {"verb": "sync", "source": {"package": "a.zip"}, "allowUntrusted": True}
        assert render_switches(options) == render_switches(dict(options))

    def test_map_inside_nested_rejected(self):
        """Test nested maps cannot contain maps."""
        with pytest.raises(TypeError):
            render_switches({"dest": {"inner": {"a": "1"}}})


class TestOptionValue:
    """Tests for coercing plain values."""

    def test_coercion(self):
        """Test each plain type maps to its tagged value."""
        assert option_value("Release") == Scalar("Release")
        assert option_value(3) == Scalar("3")
        assert option_value(True) == Flag(True)
        assert option_value(None) is None
        assert option_value("") is None
        assert option_value({"a": "1", "b": None}) == Nested((("a", Scalar("1")),))


class TestSplitTool:
    """Tests for split_tool."""

    def test_splits_tool(self):
        """Test the tool entry is separated from the switches."""
        tool, rest = split_tool({"tool": "msdeploy", "verb": "sync"})
        assert tool == "msdeploy"
        assert rest == {"verb": "sync"}

    def test_missing_tool(self):
        """Test a map without a tool is rejected."""
        with pytest.raises(KeyError):
            split_tool({"verb": "sync"})
