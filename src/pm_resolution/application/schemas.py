"""Pydantic schemas for pm_resolution API responses."""

from pydantic import BaseModel

from src.pm_common.datetime_utils import to_unix
from src.pm_common.enums import Side
from src.pm_resolution.domain.models import BatchItemResult, BatchSummary, ResolveResult


class ResolveResponse(BaseModel):
    market_id: int
    outcome: Side
    oracle_price_cents: int
    receipt_id: str
    resolved_at: str
    resolved_ts: int

    @classmethod
    def from_domain(cls, r: ResolveResult) -> "ResolveResponse":
        return cls(
            market_id=r.market_id,
            outcome=Side.YES if r.outcome else Side.NO,
            oracle_price_cents=r.oracle_price,
            receipt_id=r.receipt_id,
            resolved_at=r.resolved_at.isoformat(),
            resolved_ts=to_unix(r.resolved_at),  # type: ignore[arg-type]
        )


class BatchItemResponse(BaseModel):
    market_id: int
    status: str
    attempts: int
    outcome: Side | None = None
    oracle_price_cents: int | None = None
    receipt_id: str | None = None
    error: str | None = None

    @classmethod
    def from_domain(cls, item: BatchItemResult) -> "BatchItemResponse":
        r = item.result
        return cls(
            market_id=item.market_id,
            status=item.status.value,
            attempts=item.attempts,
            outcome=None if r is None else (Side.YES if r.outcome else Side.NO),
            oracle_price_cents=None if r is None else r.oracle_price,
            receipt_id=None if r is None else r.receipt_id,
            error=item.error,
        )


class BatchResolveResponse(BaseModel):
    total_resolved: int
    total_failed: int
    total_skipped: int
    results: list[BatchItemResponse]

    @classmethod
    def from_domain(cls, s: BatchSummary) -> "BatchResolveResponse":
        return cls(
            total_resolved=s.total_resolved,
            total_failed=s.total_failed,
            total_skipped=s.total_skipped,
            results=[BatchItemResponse.from_domain(i) for i in s.results],
        )
