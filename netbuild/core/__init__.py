"""
Settings, file lists and the per-run build context.
"""

from netbuild.core.config import Config, ConfigError, default_environment
from netbuild.core.filelist import FileList

__all__ = [
    "Config",
    "ConfigError",
    "FileList",
    "default_environment",
]
