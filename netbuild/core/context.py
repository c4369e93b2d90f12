"""
Build context shared by all task actions of one run.

The context is created once at startup and passed explicitly to every task.
It holds the protected settings for the selected environment, the lists of
files the clean and clobber tasks remove, and run-wide switches such as
quick mode.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .config import Config, ConfigError, DEFAULT_ENVIRONMENT, default_environment
from .filelist import FileList, strip_template
from ..tools.teamcity import TeamCity

logger = logging.getLogger(__name__)


@dataclass
class BuildContext:
    """
    Per-run state handed to task actions.

    Attributes:
        config: Build settings (protected once configured)
        environment: Name of the selected environment
        clean: Intermediate files removed by ``clean``
        clobber: Build outputs removed by ``clobber``
        quick: Skip compiling projects whose outputs are up to date
        teamcity: Reporter for CI statistics and status text
    """

    config: Config = field(default_factory=Config)
    environment: Optional[str] = None
    clean: FileList = field(default_factory=FileList)
    clobber: FileList = field(default_factory=FileList)
    quick: bool = False
    teamcity: Optional[TeamCity] = None

    @property
    def configured(self) -> bool:
        return self.environment is not None

    def configure(self, environment: str = None) -> "BuildContext":
        """
        Load and protect the settings for an environment.

        Configuring is done once per run; asking for the same environment
        again is a no-op.
        """
        environment = environment or DEFAULT_ENVIRONMENT
        if self.environment == environment:
            return self
        if self.environment is not None:
            raise ConfigError(
                f"Settings are already configured for the '{self.environment}' environment; "
                f"cannot switch to '{environment}'"
            )

        logger.info(f"Loading settings for the '{environment}' environment")
        self.config.load(environment)
        self.environment = environment

        source = self.config.get("dir.source")
        self.clean.clear()
        self.clean.include("teamcity-info.xml")
        self.clean.include(f"{source}/**/obj")
        self.clean.include(f"{self.config.get('dir.test_results')}/**/*")

        self.clobber.clear()
        self.clobber.include(self.config.get("dir.build"))
        self.clobber.include(self.config.get("dir.deploy"))
        self.clobber.include(f"{source}/**/bin")
        # Remove the files generated from templates, never the templates
        self.clobber.include(f"{source}/**/*.template")
        self.clobber.map(strip_template)

        self.teamcity = TeamCity(
            enabled=bool(self.config.get("teamcity.enabled")),
            info_file=Path("teamcity-info.xml"),
        )

        self.config.protect_all()
        logger.debug(self.config.dump())
        return self

    def ensure_configured(self) -> "BuildContext":
        """Configure the default environment unless an environment was chosen."""
        if not self.configured:
            self.configure(default_environment(self.config.environ))
        return self

    @property
    def settings(self) -> Config:
        return self.ensure_configured().config

    def setting(self, key: str, default: Any = None) -> Any:
        """Shortcut for ``context.settings.get``."""
        return self.settings.get(key, default)

    def path(self, key: str, *parts: str) -> Path:
        """A configured directory or file as a Path, optionally joined with parts."""
        return Path(self.settings.require(key), *parts)
