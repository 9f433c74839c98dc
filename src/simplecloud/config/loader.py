"""
Configuration file loading and merging.

Search order:
1. Explicit path
2. .simplecloud/config.yaml (project root)
3. ~/.simplecloud/config.yaml (user home)
4. Environment / .env only

File values override environment values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml

from simplecloud.config.settings import Settings

logger = structlog.get_logger()


class ConfigFileError(ValueError):
    """Raised when a config file cannot be parsed."""


def get_config_path(explicit_path: str | Path | None = None) -> Path | None:
    """Find the configuration file to use, or None."""
    if explicit_path:
        path = Path(explicit_path)
        return path if path.exists() else None

    cwd_config = Path.cwd() / ".simplecloud" / "config.yaml"
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / ".simplecloud" / "config.yaml"
    if home_config.exists():
        return home_config

    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a flat mapping of setting overrides."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigFileError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigFileError(f"Config file {path} must contain a mapping")

    known = set(Settings.model_fields)
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("unknown_config_keys", path=str(path), keys=unknown)
    return {k: v for k, v in data.items() if k in known}


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from the environment, overridden by a config file if found."""
    config_path = get_config_path(path)
    if config_path is None:
        return Settings()

    overrides = read_config_file(config_path)
    logger.debug("loaded_config", path=str(config_path), keys=sorted(overrides))
    return Settings(**overrides)
