"""
Application settings using Pydantic.

Provides environment-based configuration loading with PROMUSAGE_ prefix.
"""

from pydantic_settings import BaseSettings

from promusage.usage.processor import DEFAULT_IGNORED_PANEL_TYPES


class Settings(BaseSettings):
    """Application settings."""

    # Panel types whose query targets are skipped
    ignored_panel_types: list[str] = list(DEFAULT_IGNORED_PANEL_TYPES)

    # Documents processed in parallel (1 = sequential)
    workers: int = 1

    # Logging
    log_level: str = "WARNING"
    log_json: bool = False

    # Provenance locations, {id} is replaced by the document id
    dashboard_location: str = "dashboards/{id}"
    monitor_location: str = "monitors/{id}"
    slo_location: str = "slos/{id}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "PROMUSAGE_"
