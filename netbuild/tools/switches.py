"""
Option Map rendering for tools that take ``-key:value`` switches.

Option values are a small tagged variant so the renderer can dispatch on the
kind of value instead of guessing from Python types:

    Scalar("Release")           -> -Configuration:Release
    Flag(True)                  -> -TreatWarningsAsErrors
    Nested({"A": Scalar("1"),
            "B": Flag(True)})   -> -Props:A=1,B

Values are never quoted or escaped. Each switch is one argv token, so callers
must not pre-quote values for a shell.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

# Key holding the executable in an option map
TOOL_KEY = "tool"


@dataclass(frozen=True)
class Scalar:
    value: str


@dataclass(frozen=True)
class Flag:
    enabled: bool


@dataclass(frozen=True)
class Nested:
    entries: Tuple[Tuple[str, "OptionValue"], ...]

    def items(self):
        return iter(self.entries)


OptionValue = Union[Scalar, Flag, Nested]


def option_value(value: Any) -> Optional[OptionValue]:
    """
    Convert a plain Python value to an OptionValue.

    Returns None for values that emit nothing (None and the empty string).
    """
    if isinstance(value, (Scalar, Flag, Nested)):
        return value
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return Flag(value)
    if isinstance(value, Mapping):
        entries = []
        for key, sub in value.items():
            converted = option_value(sub)
            if converted is not None:
                entries.append((str(key), converted))
        return Nested(tuple(entries))
    return Scalar(str(value))


def _is_set(value: Optional[OptionValue]) -> bool:
    if value is None:
        return False
    if isinstance(value, Flag):
        return value.enabled
    if isinstance(value, Scalar):
        return value.value != ""
    return True


def _render_nested(nested: Nested) -> str:
    pairs = []
    for key, value in nested.items():
        if not _is_set(value):
            continue
        if isinstance(value, Flag):
            pairs.append(key)
        elif isinstance(value, Scalar):
            pairs.append(f"{key}={value.value}")
        else:
            raise TypeError(f"Nested option '{key}' cannot contain another map")
    return ",".join(pairs)


def render_switch(key: str, value: Any) -> Optional[str]:
    """Render one option as a switch token, or None when it is omitted."""
    value = option_value(value)
    if not _is_set(value):
        return None
    if isinstance(value, Flag):
        return f"-{key}"
    if isinstance(value, Scalar):
        return f"-{key}:{value.value}"
    return f"-{key}:{_render_nested(value)}"


def switch_tokens(options: Mapping[str, Any]) -> List[str]:
    """Render an option map to switch tokens, preserving insertion order."""
    tokens = []
    for key, value in options.items():
        if key == TOOL_KEY:
            continue
        token = render_switch(key, value)
        if token is not None:
            tokens.append(token)
    return tokens


def render_switches(options: Mapping[str, Any]) -> str:
    """
    Render an option map to a single switch string.

    The reserved ``tool`` key is ignored. Rendering is a pure function of the
    map's contents and order.
    """
    return " ".join(switch_tokens(options))


def split_tool(options: Mapping[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """Separate the executable from the remaining options."""
    if TOOL_KEY not in options or not options[TOOL_KEY]:
        raise KeyError(f"Option map has no '{TOOL_KEY}' entry")
    rest = {key: value for key, value in options.items() if key != TOOL_KEY}
    return str(options[TOOL_KEY]), rest
