"""
Unified error handling for promusage CLI commands.

This module provides standardized error handling, exit codes, and
error reporting for all CLI commands.

Exit Codes:
- 0: Success
- 1: Warning (scan finished but some query targets failed to parse)
- 10: Configuration error
- 11: Document load error (missing directory, unreadable or malformed file)
- 12: Query parse error
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    WARNING = 1
    CONFIG_ERROR = 10
    LOAD_ERROR = 11
    PARSE_ERROR = 12
    UNKNOWN_ERROR = 127


class PromUsageError(Exception):
    """Base exception for promusage errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PromUsageError):
    """Raised for configuration-related errors."""

    exit_code = ExitCode.CONFIG_ERROR


class DocumentLoadError(PromUsageError):
    """Raised when a source document cannot be read or decoded.

    Load failures are fatal to the whole run.
    """

    exit_code = ExitCode.LOAD_ERROR


class QueryParseError(PromUsageError):
    """Raised by the selector extractor when a query does not parse."""

    exit_code = ExitCode.PARSE_ERROR


class WarningResult(PromUsageError):
    """Raised to indicate success with warnings."""

    exit_code = ExitCode.WARNING


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(func: F) -> F:
    """
    Decorator turning a CLI command's exceptions into exit codes.

    Usage:
        @main_with_error_handling
        def scan_command(...) -> int:
            ...
            return ExitCode.SUCCESS

    Exit codes:
        - PromUsageError subclasses: the error's exit_code, reported on the console
        - KeyboardInterrupt: 130 (standard for SIGINT)
        - Other exceptions: 127 (unknown error)
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> int:
        try:
            return func(*args, **kwargs)
        except PromUsageError as e:
            logger.error(
                "command_error",
                error_type=type(e).__name__,
                message=e.message,
                exit_code=int(e.exit_code),
                **e.details,
            )
            report_error(e)
            return e.exit_code
        except KeyboardInterrupt:
            logger.info("command_interrupted")
            return 130
        except Exception as e:
            logger.error(
                "unexpected_error",
                error_type=type(e).__name__,
                message=str(e),
                exit_code=int(ExitCode.UNKNOWN_ERROR),
            )
            return ExitCode.UNKNOWN_ERROR

    return wrapper  # type: ignore[return-value]


def format_error_message(error: PromUsageError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg


def report_error(error: PromUsageError) -> None:
    """Print an error, or a warning for WarningResult, to the console."""
    from promusage.cli import ux

    if isinstance(error, WarningResult):
        ux.warning(format_error_message(error))
    else:
        ux.error(format_error_message(error))
