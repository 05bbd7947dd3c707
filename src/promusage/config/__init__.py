"""
promusage configuration.

Provides configuration management with:
- Pydantic-based settings (environment variables, .env files)
- Per-project and user-level YAML config files
"""

from promusage.config.loader import get_config_path, load_config, read_config_file
from promusage.config.settings import Settings

__all__ = [
    "Settings",
    "get_config_path",
    "load_config",
    "read_config_file",
]
