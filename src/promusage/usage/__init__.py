"""
Metric usage extraction for PromQL embedded in dashboards, monitors and SLOs.

Normalizes templated queries, extracts their selectors and folds the
metric and label names into a single registry.
"""

from promusage.usage.documents import (
    DashboardDocument,
    Document,
    DocumentKind,
    MonitorDocument,
    Panel,
    QueryTarget,
    SLIMetric,
    SLODocument,
    decode_document,
)
from promusage.usage.loader import load_backup, load_document
from promusage.usage.normalizer import normalize_expression
from promusage.usage.processor import (
    DEFAULT_IGNORED_PANEL_TYPES,
    UsageProcessor,
    process_documents,
)
from promusage.usage.registry import MetricRecord, MetricRegistry, ProvenanceEntry
from promusage.usage.report import OutputFormat, render_report
from promusage.usage.results import Diagnostic, ScanResult, Tally, TargetState
from promusage.usage.selectors import Matcher, extract_selectors, metric_and_labels
from promusage.usage.variables import (
    GLOBAL_VARIABLES,
    Template,
    Variable,
    build_variable_table,
)

__all__ = [
    # Documents
    "Document",
    "DocumentKind",
    "DashboardDocument",
    "MonitorDocument",
    "SLODocument",
    "Panel",
    "QueryTarget",
    "SLIMetric",
    "decode_document",
    "load_backup",
    "load_document",
    # Normalization
    "GLOBAL_VARIABLES",
    "Template",
    "Variable",
    "build_variable_table",
    "normalize_expression",
    # Extraction
    "Matcher",
    "extract_selectors",
    "metric_and_labels",
    # Aggregation
    "MetricRecord",
    "MetricRegistry",
    "ProvenanceEntry",
    "DEFAULT_IGNORED_PANEL_TYPES",
    "UsageProcessor",
    "process_documents",
    # Results
    "Diagnostic",
    "ScanResult",
    "Tally",
    "TargetState",
    "OutputFormat",
    "render_report",
]
