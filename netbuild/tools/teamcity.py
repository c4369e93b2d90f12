"""
TeamCity build reporting.

Statistics are published two ways: as ``##teamcity[buildStatisticValue ...]``
service messages on stdout, and in ``teamcity-info.xml``, which TeamCity
reads at the end of the build together with the appended status text.
When not running under TeamCity, values are only logged.
"""
import logging
import sys
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


def escape_value(value: Any) -> str:
    """Escape a value for a TeamCity service message."""
    text = str(value)
    for char, replacement in (
        ("|", "||"),
        ("'", "|'"),
        ("\n", "|n"),
        ("\r", "|r"),
        ("[", "|["),
        ("]", "|]"),
    ):
        text = text.replace(char, replacement)
    return text


class TeamCity:
    """Collects statistics and status text for the current build."""

    def __init__(self, enabled: bool = False, info_file: Optional[Path] = None, stream=None):
        self.enabled = enabled
        self.info_file = Path(info_file) if info_file else Path("teamcity-info.xml")
        self.stream = stream or sys.stdout

    def _load_info(self) -> ET.ElementTree:
        if self.info_file.exists():
            return ET.parse(self.info_file)
        return ET.ElementTree(ET.Element("build"))

    def _save_info(self, tree: ET.ElementTree):
        self.info_file.parent.mkdir(parents=True, exist_ok=True)
        tree.write(self.info_file, encoding="utf-8", xml_declaration=True)

    def add_statistic(self, key: str, value: Any):
        """Publish a build statistic."""
        logger.info(f"Statistic {key} = {value}")
        if not self.enabled:
            return

        self.stream.write(
            f"##teamcity[buildStatisticValue key='{escape_value(key)}' value='{escape_value(value)}']\n"
        )
        self.stream.flush()

        tree = self._load_info()
        ET.SubElement(tree.getroot(), "statisticValue", key=str(key), value=str(value))
        self._save_info(tree)

    def append_build_status_text(self, text: str):
        """Append text to the build status shown in TeamCity."""
        logger.info(text)
        if not self.enabled:
            return

        tree = self._load_info()
        root = tree.getroot()
        status = root.find("statusInfo")
        if status is None:
            status = ET.SubElement(root, "statusInfo")
        entry = ET.SubElement(status, "text", action="append")
        entry.text = f" {text}"
        self._save_info(tree)
