"""
Configuration file loading and merging.

Search order:
1. Explicit path (--config flag)
2. .promusage/config.yaml (project root)
3. ~/.promusage/config.yaml (user home)
4. Environment variables and defaults only

Keys from the file override environment-derived settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from promusage.config.settings import Settings
from promusage.core.errors import ConfigurationError

logger = structlog.get_logger()


def get_config_path(explicit_path: str | Path | None = None) -> Path | None:
    """
    Find the configuration file to use.

    Search order:
    1. Explicit path if provided
    2. .promusage/config.yaml in current directory
    3. ~/.promusage/config.yaml in home directory

    Returns:
        Path to config file or None if not found

    Raises:
        ConfigurationError: If an explicit path does not exist
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        raise ConfigurationError(f"Config file not found: {path}")

    cwd_config = Path.cwd() / ".promusage" / "config.yaml"
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / ".promusage" / "config.yaml"
    if home_config.exists():
        return home_config

    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a dict of setting overrides."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file: {path}", details={"error": str(e)}) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {path}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {path}")

    unknown = sorted(set(data) - set(Settings.model_fields))
    if unknown:
        raise ConfigurationError(
            f"Unknown config keys in {path}", details={"keys": ", ".join(unknown)}
        )
    return data


def load_config(explicit_path: str | Path | None = None, **overrides: Any) -> Settings:
    """
    Build settings from environment, config file and explicit overrides.

    Overrides with a value of None are ignored, so CLI flags that were not
    given do not mask the file or the environment.
    """
    values: dict[str, Any] = {}
    path = get_config_path(explicit_path)
    if path is not None:
        values.update(read_config_file(path))
        logger.debug("config_loaded", path=str(path))

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError("Invalid configuration", details={"error": str(e)}) from e
