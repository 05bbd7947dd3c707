"""CLI commands for scanning a backup and normalizing single queries."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import structlog
from rich.markup import escape

from promusage.cli.ux import console, info, success
from promusage.config import load_config
from promusage.core.errors import (
    ConfigurationError,
    ExitCode,
    WarningResult,
    main_with_error_handling,
)
from promusage.usage.documents import DocumentKind
from promusage.usage.loader import load_backup
from promusage.usage.normalizer import normalize_expression
from promusage.usage.processor import process_documents
from promusage.usage.registry import MetricRegistry
from promusage.usage.report import OutputFormat, format_tally, render_report
from promusage.usage.results import ScanResult
from promusage.usage.selectors import extract_selectors
from promusage.usage.variables import Variable

logger = structlog.get_logger()


@main_with_error_handling
def scan_command(
    backup_dir: str,
    provenance: bool = False,
    output_format: str = OutputFormat.TEXT.value,
    output_file: Optional[str] = None,
    ignore_panel_types: Optional[Sequence[str]] = None,
    workers: Optional[int] = None,
    strict: bool = False,
    config_path: Optional[str] = None,
) -> int:
    """
    Scan a backup directory and print the metric usage inventory.

    Returns:
        0 on success, 1 with --strict when some targets failed to parse
    """
    settings = load_config(
        config_path,
        ignored_panel_types=list(ignore_panel_types) if ignore_panel_types else None,
        workers=workers,
    )

    documents = load_backup(
        backup_dir,
        locations={
            DocumentKind.DASHBOARD: settings.dashboard_location,
            DocumentKind.MONITOR: settings.monitor_location,
            DocumentKind.SLO: settings.slo_location,
        },
    )

    registry = MetricRegistry(track_provenance=provenance)
    result = process_documents(
        documents,
        registry,
        ignored_categories=settings.ignored_panel_types,
        workers=settings.workers,
    )

    report = render_report(registry, result, output_format, provenance=provenance)
    _write_report(report, output_file)
    _display_diagnostics(result)
    _display_tally(result)

    logger.info(
        "scan_complete",
        backup_dir=backup_dir,
        metrics=len(registry),
        skipped=result.tally.skipped,
        succeeded=result.tally.succeeded,
        failed=result.tally.failed,
    )

    if strict and not result.success:
        raise WarningResult(
            "Some query targets failed to parse", details={"failed": result.tally.failed}
        )
    return ExitCode.SUCCESS


def _write_report(report: str, output_file: Optional[str]) -> None:
    if output_file:
        path = Path(output_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report + "\n" if report else "")
        success(f"Report written to {path}")
    elif report:
        print(report)


def _display_diagnostics(result: ScanResult) -> None:
    for diagnostic in result.diagnostics:
        console.print(escape(diagnostic.render()), soft_wrap=True)


def _display_tally(result: ScanResult) -> None:
    console.print(escape(format_tally(result.tally)), soft_wrap=True)


def parse_variable(text: str) -> Variable:
    """Parse a ``NAME=VALUE`` command line variable."""
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise ConfigurationError(f"Invalid variable '{text}', expected NAME=VALUE")
    return Variable(name=name, value=value)


@main_with_error_handling
def normalize_command(
    expression: str,
    variables: Optional[Sequence[str]] = None,
    show_selectors: bool = False,
) -> int:
    """Print the normalized form of a single query, optionally with its selectors."""
    table = [parse_variable(text) for text in variables or []]
    normalized = normalize_expression(expression, table)
    print(normalized)

    if not show_selectors:
        return ExitCode.SUCCESS

    groups = extract_selectors(normalized)
    if not groups:
        info("No selectors found")
    for group in groups:
        matchers = ", ".join(f'{m.name}{m.op}"{m.value}"' for m in group)
        print(f"{{{matchers}}}")
    return ExitCode.SUCCESS
