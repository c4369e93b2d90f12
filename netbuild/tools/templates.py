"""
Configuration file templates.

``App.config.template`` is rendered to ``App.config`` next to it with Jinja2,
using the build settings as the template context, e.g.
``{{ database.connectionstring }}``. Undefined settings are errors.
"""
import logging
from pathlib import Path
from typing import Union

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

from ..core.config import Config, ConfigError

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".template"

environment = Environment(undefined=StrictUndefined, keep_trailing_newline=True)


class QuickTemplate:
    """Renders one template file from the build settings."""

    def __init__(self, template: Union[str, Path]):
        self.template = Path(template)

    @property
    def output(self) -> Path:
        if self.template.suffix != TEMPLATE_SUFFIX:
            raise ValueError(f"Not a template: {self.template}")
        return self.template.with_suffix("")

    def render(self, config: Config) -> str:
        text = self.template.read_text(encoding="utf-8")
        try:
            return environment.from_string(text).render(**config.to_dict())
        except UndefinedError as e:
            raise ConfigError(f"Template {self.template} uses an undefined setting: {e}") from e
        except TemplateSyntaxError as e:
            raise ConfigError(f"Invalid template {self.template}: {e}") from e

    def exec(self, config: Config) -> Path:
        """Render the template and write the output file."""
        output = self.output
        output.write_text(self.render(config), encoding="utf-8")
        logger.info(f"Generated {output} from {self.template.name}")
        return output
