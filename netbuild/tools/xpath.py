"""
Attribute lookups in tool reports.

Reports from CLOC and NCoverExplorer are read with absolute expressions such
as ``/results/languages/language[@name='C#']/@code``. ElementTree supports
the element steps and ``[@attr='value']`` predicates but not a trailing
attribute step, which is handled here.
"""
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Union


def select_attribute(root: ET.Element, expression: str) -> Optional[str]:
    """
    Evaluate an ``/root/step/.../@attribute`` expression against a document root.

    Returns:
        The attribute value, or None when the element or attribute is missing
    """
    path, _, attribute = expression.rpartition("/@")
    if not attribute or not path.startswith("/"):
        raise ValueError(f"Unsupported expression: {expression}")

    steps = path.lstrip("/").split("/", 1)
    if steps[0] != root.tag:
        return None

    element = root if len(steps) == 1 else root.find(steps[1])
    if element is None:
        return None
    return element.get(attribute)


def read_statistics(
    report: Union[str, Path],
    statistics: Mapping[str, str],
    callback: Callable[[str, str], None] = None,
) -> Dict[str, Optional[str]]:
    """
    Read named values from an XML report.

    Args:
        report: Path of the XML report
        statistics: Statistic name mapped to an attribute expression
        callback: Called with (name, value) for every value found

    Returns:
        Statistic name mapped to its value (None when not found)
    """
    root = ET.parse(report).getroot()
    results = {}
    for key, expression in statistics.items():
        value = select_attribute(root, expression)
        results[key] = value
        if value is not None and callback is not None:
            callback(key, value)
    return results
