"""
Drive documents through normalization, extraction and aggregation.

Each query target goes through a one-shot state machine:

    start -> SKIPPED    category denylisted or expression blank
    start -> FAILED     the normalized query does not parse
    start -> SUCCEEDED  selectors merged into the registry

A failed target never stops the scan; whatever earlier targets added to
the registry stays there.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence

import structlog

from promusage.core.errors import QueryParseError
from promusage.logging import bind_context
from promusage.usage.documents import (
    DashboardDocument,
    Document,
    MonitorDocument,
    QueryTarget,
    SLODocument,
)
from promusage.usage.normalizer import normalize_expression
from promusage.usage.registry import MetricRegistry
from promusage.usage.results import Diagnostic, ScanResult, TargetState
from promusage.usage.selectors import SelectorGroup, extract_selectors
from promusage.usage.variables import GLOBAL_VARIABLES, Variable, build_variable_table

logger = structlog.get_logger()

# Panel types that never hold PromQL worth inspecting
DEFAULT_IGNORED_PANEL_TYPES = ("text", "logs", "news", "canvas", "dashlist", "table")

Extractor = Callable[[str], List[SelectorGroup]]


class UsageProcessor:
    """Processes documents into a shared registry."""

    def __init__(
        self,
        registry: MetricRegistry,
        ignored_categories: Iterable[str] = DEFAULT_IGNORED_PANEL_TYPES,
        global_variables: Sequence[Variable] = GLOBAL_VARIABLES,
        extractor: Extractor = extract_selectors,
    ) -> None:
        self.registry = registry
        self.ignored_categories = frozenset(ignored_categories)
        self.global_variables = tuple(global_variables)
        self.extractor = extractor

    def is_eligible(self, target: QueryTarget) -> bool:
        if target.category is not None and target.category in self.ignored_categories:
            return False
        return bool(target.expression.strip())

    def process_target(
        self,
        target: QueryTarget,
        variables: Sequence[Variable],
        location: str,
        source: str,
        result: ScanResult,
    ) -> TargetState:
        """Run one target to its terminal state and record it in ``result``."""
        if not self.is_eligible(target):
            result.tally.record(TargetState.SKIPPED)
            return TargetState.SKIPPED

        normalized = normalize_expression(target.expression, variables, self.global_variables)
        try:
            groups = self.extractor(normalized)
        except QueryParseError as e:
            diagnostic = Diagnostic(
                location=location,
                source=source,
                error=e.message,
                original=target.expression,
                normalized=normalized,
            )
            logger.warning(
                "target_parse_failed",
                location=location,
                source=source,
                error=e.message,
                original=target.expression,
                normalized=normalized,
            )
            result.diagnostics.append(diagnostic)
            result.tally.record(TargetState.FAILED)
            return TargetState.FAILED

        self.registry.add_many(location, groups)
        result.tally.record(TargetState.SUCCEEDED)
        return TargetState.SUCCEEDED

    def process_dashboard(self, document: DashboardDocument) -> ScanResult:
        result = ScanResult()
        variables = build_variable_table(document.templates)
        for panel in document.panels:
            source = f"Dashboard '{document.uid}', Panel '{panel.id}'"
            for target in panel.targets:
                self.process_target(target, variables, document.location, source, result)
        return result

    def process_monitor(self, document: MonitorDocument) -> ScanResult:
        result = ScanResult()
        self.process_target(
            document.target, (), document.location, f"Monitor '{document.id}'", result
        )
        return result

    def process_slo(self, document: SLODocument) -> ScanResult:
        """SLO metrics are declared literally and bypass parsing."""
        result = ScanResult()
        for metric in document.metrics:
            self.registry.add(document.location, metric.name, metric.labels)
            result.tally.record(TargetState.SUCCEEDED)
        return result

    def process(self, document: Document) -> ScanResult:
        """Process a single document of any kind."""
        if isinstance(document, DashboardDocument):
            result = self.process_dashboard(document)
        elif isinstance(document, MonitorDocument):
            result = self.process_monitor(document)
        elif isinstance(document, SLODocument):
            result = self.process_slo(document)
        else:
            raise TypeError(f"Unsupported document type: {type(document).__name__}")

        log = bind_context(location=document.location, kind=type(document).__name__)
        log.debug(
            "document_processed",
            skipped=result.tally.skipped,
            succeeded=result.tally.succeeded,
            failed=result.tally.failed,
        )
        return result


def process_documents(
    documents: Iterable[Document],
    registry: MetricRegistry,
    ignored_categories: Iterable[str] = DEFAULT_IGNORED_PANEL_TYPES,
    global_variables: Sequence[Variable] = GLOBAL_VARIABLES,
    workers: int = 1,
    extractor: Optional[Extractor] = None,
) -> ScanResult:
    """
    Process every document into ``registry``.

    With ``workers > 1`` documents are processed on a thread pool. Each
    document fills its own registry, which is merged into ``registry`` in
    document order once all work is done, so the outcome is the same as a
    sequential run.

    Returns:
        ScanResult with the combined tally and diagnostics in document order
    """
    ignored = tuple(ignored_categories)
    extract = extractor or extract_selectors
    documents = list(documents)
    result = ScanResult()

    if workers <= 1 or len(documents) <= 1:
        processor = UsageProcessor(registry, ignored, global_variables, extract)
        for document in documents:
            result.add(processor.process(document))
        return result

    def run(document: Document) -> tuple[MetricRegistry, ScanResult]:
        local = MetricRegistry(track_provenance=registry.track_provenance)
        processor = UsageProcessor(local, ignored, global_variables, extract)
        return local, processor.process(document)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        outcomes = list(executor.map(run, documents))

    for local, document_result in outcomes:
        registry.merge(local)
        result.add(document_result)
    return result
