"""
Registry of metrics and the label names they are queried by.

Every (metric, labels) observation from every document is folded into one
registry. The label set of a metric is the union of everything added under
its name, so adding the same observation twice changes nothing and the
final content does not depend on the order of the calls.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from promusage.usage.selectors import Matcher, metric_and_labels


@dataclass(frozen=True)
class MetricRecord:
    """A metric name and every label name it is queried by."""

    name: str
    labels: Tuple[str, ...]


@dataclass(frozen=True)
class ProvenanceEntry:
    """One observation of a metric in a source document."""

    location: str
    metric: str
    labels: Tuple[str, ...]


def _dedupe(labels: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(labels))


class MetricRegistry:
    """Accumulates metric usage across a whole run.

    Safe to share between threads: ``add`` holds a lock while it updates a
    metric's label set and the provenance list.
    """

    def __init__(self, track_provenance: bool = True) -> None:
        self.track_provenance = track_provenance
        self._entries: Dict[str, Dict[str, None]] = {}
        self._provenance: List[ProvenanceEntry] = []
        self._lock = threading.Lock()

    def _union(self, metric: str, labels: Iterable[str]) -> None:
        entry = self._entries.setdefault(metric, {})
        for label in labels:
            entry.setdefault(label, None)

    def add(self, location: str, metric: str, labels: Iterable[str]) -> None:
        """Record that ``metric`` is queried by ``labels`` in ``location``."""
        labels = _dedupe(labels)
        with self._lock:
            self._union(metric, labels)
            if self.track_provenance:
                self._provenance.append(ProvenanceEntry(location, metric, labels))

    def add_many(self, location: str, groups: Iterable[Sequence[Matcher]]) -> None:
        """Record every selector group extracted from one query."""
        for group in groups:
            metric, labels = metric_and_labels(group)
            self.add(location, metric, labels)

    def merge(self, other: MetricRegistry) -> None:
        """Fold another registry into this one, provenance order preserved."""
        if other is self:
            return
        records = other.records(sort=False)
        provenance = other.provenance
        with self._lock:
            for record in records:
                self._union(record.name, record.labels)
            if self.track_provenance:
                self._provenance.extend(provenance)

    def labels(self, metric: str) -> frozenset[str]:
        with self._lock:
            return frozenset(self._entries.get(metric, {}))

    def records(self, sort: bool = True) -> List[MetricRecord]:
        """Snapshot of the registry.

        With ``sort`` the metrics and their labels are ordered by name,
        otherwise they come in first-seen order.
        """
        with self._lock:
            items = [(name, tuple(labels)) for name, labels in self._entries.items()]
        if sort:
            return [MetricRecord(name, tuple(sorted(labels))) for name, labels in sorted(items)]
        return [MetricRecord(name, labels) for name, labels in items]

    @property
    def provenance(self) -> List[ProvenanceEntry]:
        with self._lock:
            return list(self._provenance)

    def __contains__(self, metric: object) -> bool:
        return metric in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MetricRecord]:
        return iter(self.records())
