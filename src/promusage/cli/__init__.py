"""
CLI commands for promusage.
"""

from promusage.cli.usage import normalize_command, scan_command

__all__ = [
    "scan_command",
    "normalize_command",
]
