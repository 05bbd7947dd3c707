"""Core modules for promusage - centralized definitions and utilities."""

from promusage.core.errors import (
    ConfigurationError,
    DocumentLoadError,
    ExitCode,
    PromUsageError,
    QueryParseError,
    WarningResult,
    format_error_message,
    report_error,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "PromUsageError",
    "ConfigurationError",
    "DocumentLoadError",
    "QueryParseError",
    "WarningResult",
    "main_with_error_handling",
    "format_error_message",
    "report_error",
]
