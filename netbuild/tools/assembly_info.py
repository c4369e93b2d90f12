"""
Generates the shared C# version file compiled into every assembly.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

logger = logging.getLogger(__name__)

HEADER = """\
//------------------------------------------------------------------------------
// <auto-generated>
//     This code was generated by netbuild.
//     Changes to this file will be lost when the code is regenerated.
// </auto-generated>
//------------------------------------------------------------------------------
"""


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


class AssemblyInfoBuilder:
    """
    Renders ``[assembly: Attribute(value)]`` lines.
    """

    USINGS = ("System.Reflection", "System.Runtime.InteropServices")

    def __init__(self, attributes: Mapping[str, Any]):
        self.attributes: Dict[str, Any] = dict(attributes)

    def render(self) -> str:
        lines = [HEADER]
        lines += [f"using {namespace};" for namespace in self.USINGS]
        lines.append("")
        for name, value in self.attributes.items():
            if value is None:
                continue
            lines.append(f"[assembly: {name}({_literal(value)})]")
        return "\n".join(lines) + "\n"

    def write(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(), encoding="utf-8")
        logger.info(f"Wrote version information to {path}")
        return path
