"""
Source documents found in an observability backup.

Three kinds of document exist and they are modeled as a closed union of
plain dataclasses, decoded once from their JSON form:

- ``DashboardDocument``: template variables plus panels holding query targets
- ``MonitorDocument``: a single alert expression, only built-in variables apply
- ``SLODocument``: metrics and label keys declared literally, no query to parse
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from promusage.core.errors import DocumentLoadError
from promusage.usage.variables import Template, as_value_list


class DocumentKind(str, Enum):
    """Kinds of document, named after their backup sub-directory."""

    DASHBOARD = "dashboards"
    MONITOR = "monitors"
    SLO = "slos"


DEFAULT_LOCATIONS: Dict[DocumentKind, str] = {
    DocumentKind.DASHBOARD: "dashboards/{id}",
    DocumentKind.MONITOR: "monitors/{id}",
    DocumentKind.SLO: "slos/{id}",
}


@dataclass
class QueryTarget:
    """A raw query plus the category used to decide eligibility.

    ``category`` is the panel type for dashboards and ``None`` for monitors,
    which are always eligible.
    """

    expression: str
    category: Optional[str] = None


@dataclass
class Panel:
    id: Any
    type: str = ""
    targets: List[QueryTarget] = field(default_factory=list)


@dataclass
class SLIMetric:
    name: str
    labels: List[str] = field(default_factory=list)


@dataclass
class DashboardDocument:
    uid: str
    location: str
    templates: List[Template] = field(default_factory=list)
    panels: List[Panel] = field(default_factory=list)


@dataclass
class MonitorDocument:
    id: str
    location: str
    expression: str = ""

    @property
    def target(self) -> QueryTarget:
        return QueryTarget(expression=self.expression)


@dataclass
class SLODocument:
    id: str
    location: str
    metrics: List[SLIMetric] = field(default_factory=list)


Document = Union[DashboardDocument, MonitorDocument, SLODocument]


def _string(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _identifier(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _objects(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def format_location(template: str, identifier: str) -> str:
    try:
        return template.format(id=identifier)
    except (KeyError, IndexError, ValueError) as exc:
        raise DocumentLoadError(
            f"Invalid location template: {template}", details={"error": str(exc)}
        ) from exc


def _decode_template(data: Dict[str, Any]) -> Template:
    current = data.get("current")
    values = as_value_list(current.get("value")) if isinstance(current, dict) else []
    return Template(
        name=_string(data.get("name")),
        current_values=values,
        query=_string(data.get("query")),
        all_value=_string(data.get("allValue")),
    )


def _decode_panels(items: Any) -> List[Panel]:
    """Decode panels, flattening the panels nested in collapsed rows."""
    panels: List[Panel] = []
    for data in _objects(items):
        panel_type = _string(data.get("type"))
        targets = [
            QueryTarget(expression=_string(target.get("expr")), category=panel_type)
            for target in _objects(data.get("targets"))
        ]
        panels.append(Panel(id=data.get("id"), type=panel_type, targets=targets))
        panels.extend(_decode_panels(data.get("panels")))
    return panels


def decode_dashboard(data: Dict[str, Any], location: Optional[str] = None) -> DashboardDocument:
    """Decode a dashboard export (``{"dashboard": {...}}``)."""
    dashboard = data.get("dashboard")
    if not isinstance(dashboard, dict):
        dashboard = {}
    uid = _identifier(dashboard.get("uid"))
    templating = dashboard.get("templating")
    templates = _objects(templating.get("list")) if isinstance(templating, dict) else []

    return DashboardDocument(
        uid=uid,
        location=format_location(location or DEFAULT_LOCATIONS[DocumentKind.DASHBOARD], uid),
        templates=[_decode_template(template) for template in templates],
        panels=_decode_panels(dashboard.get("panels")),
    )


def decode_monitor(data: Dict[str, Any], location: Optional[str] = None) -> MonitorDocument:
    """Decode an alert monitor (``{"id": ..., "expression": ...}``)."""
    monitor_id = _identifier(data.get("id"))
    return MonitorDocument(
        id=monitor_id,
        location=format_location(location or DEFAULT_LOCATIONS[DocumentKind.MONITOR], monitor_id),
        expression=_string(data.get("expression")),
    )


def decode_slo(data: Dict[str, Any], location: Optional[str] = None) -> SLODocument:
    """Decode an SLO definition (``{"id": ..., "sliMetrics": [...]}``)."""
    slo_id = _identifier(data.get("id"))
    metrics = [
        SLIMetric(
            name=_string(metric.get("metricName")),
            labels=[_string(f.get("key")) for f in _objects(metric.get("filters"))],
        )
        for metric in _objects(data.get("sliMetrics"))
    ]
    return SLODocument(
        id=slo_id,
        location=format_location(location or DEFAULT_LOCATIONS[DocumentKind.SLO], slo_id),
        metrics=metrics,
    )


DECODERS: Dict[DocumentKind, Callable[[Dict[str, Any], Optional[str]], Document]] = {
    DocumentKind.DASHBOARD: decode_dashboard,
    DocumentKind.MONITOR: decode_monitor,
    DocumentKind.SLO: decode_slo,
}


def decode_document(
    kind: DocumentKind, data: Any, location: Optional[str] = None
) -> Document:
    """
    Decode a parsed JSON document of the given kind.

    Args:
        kind: Kind of document
        data: Parsed JSON content
        location: Location template, ``{id}`` is replaced by the document id

    Raises:
        DocumentLoadError: If the document is not a JSON object
    """
    if not isinstance(data, dict):
        raise DocumentLoadError(
            f"Expected a JSON object for {kind.value} document",
            details={"type": type(data).__name__},
        )
    return DECODERS[kind](data, location)
