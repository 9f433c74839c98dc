"""
simplecloud configuration.

- Pydantic-based settings (environment variables, .env files)
- Optional YAML config file overrides
"""

from simplecloud.config.loader import (
    ConfigFileError,
    get_config_path,
    load_settings,
    read_config_file,
)
from simplecloud.config.settings import Settings, get_settings

__all__ = [
    "ConfigFileError",
    "Settings",
    "get_config_path",
    "get_settings",
    "load_settings",
    "read_config_file",
]
