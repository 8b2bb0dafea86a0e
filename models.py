"""Shared typed models for the crawl and extraction pipelines."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

NOT_EXTRACTED = "Not extracted"
ANALYSIS_FAILED = "Analysis Failed"


class ArchitectureType(str, Enum):
    CNN = "CNN"
    TRANSFORMER = "Transformer"
    HYBRID = "Hybrid"
    UNKNOWN = "Unknown"
    OTHER = "Other"


class PaperStatus(str, Enum):
    """Lifecycle of a paper record: idle -> analyzing -> done | error."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    DONE = "done"
    ERROR = "error"

    def can_transition_to(self, target: PaperStatus) -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[PaperStatus, frozenset[PaperStatus]] = {
    PaperStatus.IDLE: frozenset({PaperStatus.ANALYZING}),
    PaperStatus.ANALYZING: frozenset({PaperStatus.DONE, PaperStatus.ERROR}),
    PaperStatus.DONE: frozenset(),
    PaperStatus.ERROR: frozenset(),
}


@dataclass(frozen=True, slots=True)
class Paper:
    """Normalized paper record produced by the crawl and enriched by extraction."""

    paper_id: str
    title: str
    authors: tuple[str, ...] = ()
    year: str = ""
    url: str | None = None
    architecture: ArchitectureType = ArchitectureType.UNKNOWN
    datasets: tuple[str, ...] = ()
    data_split: str = NOT_EXTRACTED
    annotation_type: str = NOT_EXTRACTED
    metrics: tuple[str, ...] = ()
    results_summary: str = NOT_EXTRACTED
    innovation_point: str = NOT_EXTRACTED
    is_analyzed: bool = False
    status: PaperStatus = PaperStatus.IDLE

    def __post_init__(self) -> None:
        if self.status is PaperStatus.DONE and not self.is_analyzed:
            raise ValueError(f"Paper {self.paper_id} is marked done but not analyzed")

    def with_status(self, status: PaperStatus) -> Paper:
        """Return a copy moved to ``status``, rejecting transitions the lifecycle forbids."""
        if not self.status.can_transition_to(status):
            raise ValueError(
                f"Illegal status transition for paper {self.paper_id}: "
                f"{self.status.value} -> {status.value}"
            )
        return replace(self, status=status)
