"""Result types for a usage scan."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List


class TargetState(Enum):
    """Terminal state of a single query target."""

    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class Tally:
    """Counts of skipped, succeeded and failed query targets."""

    skipped: int = 0
    succeeded: int = 0
    failed: int = 0

    def record(self, state: TargetState) -> None:
        if state is TargetState.SKIPPED:
            self.skipped += 1
        elif state is TargetState.SUCCEEDED:
            self.succeeded += 1
        else:
            self.failed += 1

    def add(self, other: Tally) -> None:
        """Accumulate another tally into this one."""
        self.skipped += other.skipped
        self.succeeded += other.succeeded
        self.failed += other.failed

    def __add__(self, other: Tally) -> Tally:
        return Tally(
            skipped=self.skipped + other.skipped,
            succeeded=self.succeeded + other.succeeded,
            failed=self.failed + other.failed,
        )

    @property
    def total(self) -> int:
        return self.skipped + self.succeeded + self.failed

    @classmethod
    def combine(cls, tallies: Iterable[Tally]) -> Tally:
        result = cls()
        for tally in tallies:
            result.add(tally)
        return result


@dataclass
class Diagnostic:
    """
    A query target that failed to parse.

    Carries both the original and the normalized query so a reader can tell
    whether normalization or the query itself is at fault.
    """

    location: str
    source: str
    error: str
    original: str
    normalized: str

    def render(self) -> str:
        return (
            f"{self.source}\n{self.error}\n"
            f"Original:\t{self.original}\nNormalized:\t{self.normalized}\n"
        )


@dataclass
class ScanResult:
    """Outcome of processing one or more documents."""

    tally: Tally = field(default_factory=Tally)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def add(self, other: ScanResult) -> None:
        self.tally.add(other.tally)
        self.diagnostics.extend(other.diagnostics)

    @property
    def success(self) -> bool:
        """Whether every eligible target parsed."""
        return self.tally.failed == 0
