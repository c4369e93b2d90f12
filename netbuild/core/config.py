"""
Configuration Management for netbuild

This module provides the layered settings every build task reads:
- Built-in defaults for directories, tools and the database
- Environment sections of properties.yml with ``default_to`` inheritance
- A local override file kept out of version control
- NETBUILD_* environment variables and the CI build number
- Derived values (connection string, package name)

Settings are loaded once per run for the selected environment and then
protected against further changes.
"""

import copy
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from ..taskgraph.core import BuildError

logger = logging.getLogger(__name__)

ENV_PREFIX = "NETBUILD_"
ENV_SELECTOR = "NETBUILD_ENV"
ENVIRONMENTS = ("development", "test", "production")
DEFAULT_ENVIRONMENT = "development"
DEFAULT_BUILD_NUMBER = "1.0.0.0"


class ConfigError(BuildError):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class ConfigSource:
    """Represents a configuration source with priority and metadata."""

    name: str
    data: Dict[str, Any]
    priority: int = 0
    source_type: str = "unknown"
    file_path: Optional[Path] = None


def default_environment(environ: Mapping[str, str] = None) -> str:
    """The environment selected by NETBUILD_ENV, or development."""
    environ = os.environ if environ is None else environ
    return environ.get(ENV_SELECTOR, DEFAULT_ENVIRONMENT).lower()


class Config:
    """
    Layered build settings.

    Sources are merged by priority (higher wins):
      0   built-in defaults
      10  properties.yml section for the environment
      30  local properties file
      60  NETBUILD_* environment variables
      80  values derived from the merged settings and the CI environment
      100 runtime set() calls
    """

    def __init__(
        self,
        config_dir: Union[str, Path] = None,
        properties_file: str = "properties.yml",
        environ: Mapping[str, str] = None,
    ):
        self.config_dir = Path(config_dir) if config_dir else Path.cwd()
        self.properties_file = properties_file
        self.environ = os.environ if environ is None else environ
        self.environment: Optional[str] = None
        self.sources: List[ConfigSource] = []
        self._data: Dict[str, Any] = {}
        self._loaded = False
        self._protected = False

    def load(self, environment: str = None, reload: bool = False) -> "Config":
        """
        Load configuration for an environment from all available sources.

        Args:
            environment: Environment section to load (default: NETBUILD_ENV
                or development)
            reload: Force reload even if already loaded

        Returns:
            Self for method chaining
        """
        environment = (environment or default_environment(self.environ)).lower()
        if self._loaded and not reload and environment == self.environment:
            return self
        if self._protected:
            raise ConfigError("Configuration is protected and cannot be reloaded")

        self.environment = environment
        self.sources.clear()

        # Load in priority order (higher priority overwrites lower)
        self._load_default_config()  # Priority 0
        self._load_properties(environment)  # Priority 10
        self._merge_sources()
        self._load_local_properties()  # Priority 30
        self._load_environment_vars()  # Priority 60
        self._merge_sources()
        self._load_derived_values()  # Priority 80

        self._merge_sources()
        self._loaded = True
        return self

    def _load_default_config(self):
        """Load default configuration values."""
        defaults = {
            "project": "Application",
            "build": {"configuration": "Release", "number": None},
            "dir": {
                "source": "source",
                "app": "source/app",
                "test": "source/test",
                "build": "build",
                "deploy": "deploy",
                "test_results": "build/test-results",
            },
            "tools": {
                "msbuild": "msbuild",
                "mspec": "tools/mspec/mspec.exe",
                "ncover": "tools/ncover/NCover.Console.exe",
                "ncoverexplorer": "tools/ncoverexplorer/NCoverExplorer.Console.exe",
                "fxcop": "tools/fxcop/FxCopCmd.exe",
                "stylecop": "tools/stylecop/StyleCopCmd.exe",
                "cloc": "cloc",
                "zip": "7z",
                "tarantino": "tools/tarantino/DatabaseDeployer.exe",
                "sqlpubwiz": "sqlpubwiz",
                "msdeploy": "msdeploy",
            },
            "database": {
                "server": "localhost",
                "name": None,
                "sspi": True,
                "username": None,
                "password": None,
                "scripts": "source/database",
                "sample_data": "source/database/sample",
            },
            "deployment": {
                "location": "deploy/site",
                "server": None,
                "username": None,
                "password": None,
                "allow_untrusted": False,
            },
            "quality": {"min_coverage": 70},
            "teamcity": {"enabled": False},
            "local_properties": "local-properties.yml",
        }

        self.sources.append(
            ConfigSource(
                name="defaults", data=defaults, priority=0, source_type="internal"
            )
        )

    def _load_properties(self, environment: str):
        """Load the environment's section of the properties file."""
        file_path = self.config_dir / self.properties_file
        if not file_path.exists():
            logger.warning(f"No {self.properties_file} found in {self.config_dir}, using defaults")
            return

        sections = self._load_file(file_path)
        data = self._environment_section(sections, environment, file_path)
        self.sources.append(
            ConfigSource(
                name=f"{self.properties_file}:{environment}",
                data=data,
                priority=10,
                source_type="file",
                file_path=file_path,
            )
        )

    def _environment_section(
        self, sections: Dict[str, Any], environment: str, file_path: Path, seen=()
    ) -> Dict[str, Any]:
        """Resolve an environment section, following ``default_to`` parents."""
        if environment in seen:
            chain = " -> ".join(list(seen) + [environment])
            raise ConfigError(f"Circular default_to chain in {file_path}: {chain}")

        section = sections.get(environment)
        if not isinstance(section, dict):
            raise ConfigError(
                f"No settings for the '{environment}' environment in {file_path}"
            )

        section = copy.deepcopy(section)
        parent = section.pop("default_to", None)
        if parent is None:
            return section

        merged = self._environment_section(
            sections, parent, file_path, tuple(seen) + (environment,)
        )
        self._deep_merge(merged, section)
        return merged

    def _load_local_properties(self):
        """Load the developer's local override file, if there is one."""
        name = self._data.get("local_properties")
        if not name:
            return

        file_path = self.config_dir / name
        if not file_path.exists():
            return

        data = self._load_file(file_path)
        self.sources.append(
            ConfigSource(
                name=name,
                data=data,
                priority=30,
                source_type="file",
                file_path=file_path,
            )
        )

    def _load_environment_vars(self):
        """Load configuration from environment variables."""
        env_data = {}

        for key, value in self.environ.items():
            if not key.startswith(ENV_PREFIX) or key == ENV_SELECTOR:
                continue

            # Convert NETBUILD_DATABASE__SERVER -> database.server
            config_key = key[len(ENV_PREFIX) :].lower().replace("__", ".")

            # Try to parse as JSON first, then as string
            try:
                parsed_value = json.loads(value)
            except (json.JSONDecodeError, ValueError):
                parsed_value = value

            self._set_nested_value(env_data, config_key, parsed_value)

        if env_data:
            self.sources.append(
                ConfigSource(
                    name="environment",
                    data=env_data,
                    priority=60,
                    source_type="environment",
                )
            )

    def _load_derived_values(self):
        """Compute values that depend on other settings or the CI environment."""
        build_number = self.environ.get("BUILD_NUMBER") or self.get("build.number")
        database = self._data.get("database", {})

        connection = f"Data Source={database.get('server')}; Initial Catalog={database.get('name')}; "
        if database.get("sspi"):
            connection += "Integrated Security=true; "
        connection += "Persist Security Info=False;"

        package_name = f"{self.get('project')}-{build_number or DEFAULT_BUILD_NUMBER}.zip"
        package = str(Path(self.get("dir.deploy", ".")) / package_name)

        derived = {
            "build": {"number": build_number},
            "database": {"connectionstring": connection},
            "deployment": {"package": package},
            "teamcity": {
                "enabled": bool(self.environ.get("TEAMCITY_PROJECT_NAME"))
                or bool(self.get("teamcity.enabled"))
            },
        }

        self.sources.append(
            ConfigSource(
                name="derived", data=derived, priority=80, source_type="derived"
            )
        )

    def _load_file(self, file_path: Path) -> Dict[str, Any]:
        """Load a YAML or JSON settings file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                if file_path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config file {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {file_path} must contain a mapping")
        return data

    def _merge_sources(self):
        """Merge all configuration sources by priority."""
        # Sort by priority (lower numbers first)
        sorted_sources = sorted(self.sources, key=lambda s: s.priority)

        self._data = {}
        for source in sorted_sources:
            self._deep_merge(self._data, copy.deepcopy(source.data))

    def _deep_merge(self, target: Dict[str, Any], source: Dict[str, Any]):
        """Deep merge source dictionary into target dictionary."""
        for key, value in source.items():
            if (
                key in target
                and isinstance(target[key], dict)
                and isinstance(value, dict)
            ):
                self._deep_merge(target[key], value)
            else:
                target[key] = value

    def _set_nested_value(self, data: Dict[str, Any], key_path: str, value: Any):
        """Set a nested value using dot notation (e.g., 'database.server')."""
        keys = key_path.split(".")
        current = data

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., 'dir.build')
            default: Default value if key is not found

        Returns:
            The configuration value or default
        """
        keys = key.split(".")
        current = self._data

        try:
            for k in keys:
                current = current[k]
        except (KeyError, TypeError):
            return default
        return default if current is None else current

    def require(self, key: str) -> Any:
        """Get a configuration value that must be set."""
        value = self.get(key)
        if value is None or value == "":
            raise ConfigError(
                f"Missing required configuration: {key} "
                f"(environment: {self.environment or 'not loaded'})"
            )
        return value

    def set(self, key: str, value: Any, priority: int = 100):
        """
        Set a configuration value at runtime.

        Derived values such as the connection string are recomputed, so
        they follow the new setting.

        Args:
            key: Configuration key in dot notation
            value: Value to set
            priority: Priority for this configuration source

        Raises:
            ConfigError: If the configuration has been protected
        """
        if self._protected:
            raise ConfigError(f"Configuration is protected; cannot set '{key}'")

        runtime_data = {}
        self._set_nested_value(runtime_data, key, value)

        # Remove any existing runtime source with the same key
        self.sources = [
            s
            for s in self.sources
            if not (s.name == f"runtime.{key}" and s.source_type == "runtime")
        ]

        self.sources.append(
            ConfigSource(
                name=f"runtime.{key}",
                data=runtime_data,
                priority=priority,
                source_type="runtime",
            )
        )

        self._merge_sources()
        if self._loaded:
            self._refresh_derived_values()

    def _refresh_derived_values(self):
        """Recompute derived values from the current settings."""
        self.sources = [s for s in self.sources if s.source_type != "derived"]
        self._merge_sources()
        self._load_derived_values()
        self._merge_sources()

    def protect_all(self) -> "Config":
        """Make the settings read-only for the rest of the run."""
        self._protected = True
        return self

    @property
    def protected(self) -> bool:
        return self._protected

    def has(self, key: str) -> bool:
        """Check if a configuration key exists."""
        return self.get(key, None) is not None

    def to_dict(self) -> Dict[str, Any]:
        """Return the complete configuration as a dictionary."""
        return copy.deepcopy(self._data)

    def dump(self) -> str:
        """The merged settings as YAML."""
        return yaml.safe_dump(self._data, default_flow_style=False, sort_keys=True)

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access."""
        return self.get(key)

    def __contains__(self, key: str) -> bool:
        """Allow 'in' operator."""
        return self.has(key)

    def __str__(self) -> str:
        return f"Config(environment={self.environment}, sources={len(self.sources)})"

    def __repr__(self) -> str:
        return f"<Config(config_dir='{self.config_dir}', sources={len(self.sources)})>"
