"""Domain models for pm_resolution."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class ResolveResult:
    market_id: int
    outcome: bool
    oracle_price: int
    receipt_id: str     # id of the MARKET_RESOLVED event
    resolved_at: datetime


class BatchItemStatus(str, Enum):
    RESOLVED = "RESOLVED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass
class BatchItemResult:
    market_id: int
    status: BatchItemStatus
    attempts: int = 0
    result: ResolveResult | None = None
    error: str | None = None


@dataclass
class BatchSummary:
    results: list[BatchItemResult] = field(default_factory=list)

    def _count(self, status: BatchItemStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def total_resolved(self) -> int:
        return self._count(BatchItemStatus.RESOLVED)

    @property
    def total_failed(self) -> int:
        return self._count(BatchItemStatus.FAILED)

    @property
    def total_skipped(self) -> int:
        return self._count(BatchItemStatus.SKIPPED)
