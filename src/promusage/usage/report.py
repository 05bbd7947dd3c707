"""
Render the usage inventory.

- text: one line per metric, ``metric label1 label2 ...``
- provenance: one line per observation, ``location metric label1 ...``
- json: structured output for downstream automation
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from promusage.usage.registry import MetricRegistry
from promusage.usage.results import ScanResult, Tally


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def format_metrics(registry: MetricRegistry) -> str:
    lines = [" ".join([record.name, *record.labels]) for record in registry.records()]
    return "\n".join(lines)


def format_provenance(registry: MetricRegistry) -> str:
    lines = [
        " ".join([entry.location, entry.metric, *entry.labels]) for entry in registry.provenance
    ]
    return "\n".join(lines)


def format_tally(tally: Tally) -> str:
    return "\n".join(
        [
            f"Skipped:    {tally.skipped}",
            f"Succeeded:  {tally.succeeded}",
            f"Failed:     {tally.failed}",
        ]
    )


def format_json(registry: MetricRegistry, result: ScanResult, provenance: bool = False) -> str:
    """
    Format the inventory as JSON.

    Output structure:
    {
        "version": "1.0",
        "timestamp": "2026-01-17T14:30:00Z",
        "metrics": {"http_requests_total": ["code", "job"]},
        "summary": {"skipped": 0, "succeeded": 1, "failed": 0},
        "failures": [...]
    }
    """
    output: dict[str, Any] = {
        "version": "1.0",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "metrics": {record.name: list(record.labels) for record in registry.records()},
        "summary": {
            "skipped": result.tally.skipped,
            "succeeded": result.tally.succeeded,
            "failed": result.tally.failed,
        },
        "failures": [
            {
                "location": d.location,
                "source": d.source,
                "error": d.error,
                "original": d.original,
                "normalized": d.normalized,
            }
            for d in result.diagnostics
        ],
    }
    if provenance:
        output["provenance"] = [
            {"location": e.location, "metric": e.metric, "labels": list(e.labels)}
            for e in registry.provenance
        ]
    return json.dumps(output, indent=2, sort_keys=True)


def render_report(
    registry: MetricRegistry,
    result: ScanResult,
    output_format: OutputFormat | str = OutputFormat.TEXT,
    provenance: bool = False,
) -> str:
    """Render the inventory in the requested format."""
    if isinstance(output_format, str):
        output_format = OutputFormat(output_format)

    if output_format is OutputFormat.JSON:
        return format_json(registry, result, provenance=provenance)
    if provenance:
        return format_provenance(registry)
    return format_metrics(registry)
