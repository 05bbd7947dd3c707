"""
promusage CLI entry point.

Usage:
    promusage scan BACKUP_DIR [--provenance] [--format text|json]
    promusage normalize EXPRESSION [--var NAME=VALUE ...] [--selectors]
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from promusage import __version__
from promusage.config import load_config
from promusage.core.errors import ConfigurationError, report_error
from promusage.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promusage",
        description="Inventory the metrics and labels referenced by PromQL in dashboards, monitors and SLOs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--log-json", action="store_true", default=None, help="Emit logs as JSON")
    subparsers = parser.add_subparsers(dest="command")

    scan_parser = subparsers.add_parser("scan", help="Scan a backup directory for metric usage")
    scan_parser.add_argument("backup_dir", help="Directory holding dashboards/, monitors/ and slos/")
    scan_parser.add_argument(
        "--provenance",
        action="store_true",
        help="Print one line per source resource instead of one line per metric",
    )
    scan_parser.add_argument(
        "--format", dest="output_format", choices=["text", "json"], default="text", help="Output format"
    )
    scan_parser.add_argument("--output", dest="output_file", help="Write the report to a file")
    scan_parser.add_argument(
        "--ignore-panel-type",
        dest="ignore_panel_types",
        action="append",
        help="Panel type to skip (repeatable, replaces the default list)",
    )
    scan_parser.add_argument("--workers", type=int, help="Documents processed in parallel")
    scan_parser.add_argument(
        "--strict", action="store_true", help="Exit with status 1 when a query fails to parse"
    )
    scan_parser.add_argument("--config", dest="config_path", help="Path to config YAML")

    normalize_parser = subparsers.add_parser(
        "normalize", help="Normalize a single templated query"
    )
    normalize_parser.add_argument("expression", help="Query text")
    normalize_parser.add_argument(
        "--var",
        dest="variables",
        action="append",
        metavar="NAME=VALUE",
        help="Template variable (repeatable, applied in order)",
    )
    normalize_parser.add_argument(
        "--selectors", action="store_true", help="Also print the extracted selectors"
    )

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Flags beat the config file, which beats the environment
    try:
        settings = load_config(
            getattr(args, "config_path", None),
            log_level=args.log_level,
            log_json=args.log_json,
        )
    except ConfigurationError as e:
        report_error(e)
        sys.exit(e.exit_code)
    configure_logging(level=settings.log_level, json_output=settings.log_json)

    if args.command == "scan":
        from promusage.cli.usage import scan_command

        sys.exit(
            scan_command(
                args.backup_dir,
                provenance=args.provenance,
                output_format=args.output_format,
                output_file=args.output_file,
                ignore_panel_types=args.ignore_panel_types,
                workers=args.workers,
                strict=args.strict,
                config_path=args.config_path,
            )
        )

    if args.command == "normalize":
        from promusage.cli.usage import normalize_command

        sys.exit(
            normalize_command(
                args.expression,
                variables=args.variables,
                show_selectors=args.selectors,
            )
        )

    parser.print_help()
    sys.exit(2)


if __name__ == "__main__":
    main()
