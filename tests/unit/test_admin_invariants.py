# tests/unit/test_admin_invariants.py
"""Unit tests for pool-conservation invariant checks."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_admin.application.service import AdminService
from src.pm_admin.domain.invariants import check_market_invariants
from src.pm_common.enums import Commodity
from src.pm_market.domain.models import Market

NOW = datetime(2026, 3, 1, tzinfo=UTC)


def _market(**kwargs) -> Market:
    defaults = dict(
        id=1, commodity=Commodity.TEA, threshold_price=300, expiry_time=NOW,
        creator="admin", fee_bps=200, yes_pool=100, no_pool=50,
    )
    defaults.update(kwargs)
    return Market(**defaults)


class TestCheckMarketInvariants:
    def test_consistent_open_market(self) -> None:
        assert check_market_invariants(_market(), 100, 50) == []

    def test_pool_drift_detected(self) -> None:
        violations = check_market_invariants(_market(), 99, 50)
        assert len(violations) == 1
        assert "yes_pool=100" in violations[0]

    def test_claims_before_resolution(self) -> None:
        violations = check_market_invariants(_market(claimed_shares=10), 100, 50)
        assert violations == ["market 1: claims recorded before resolution"]

    def test_fully_claimed_market_ok(self) -> None:
        m = _market(resolved=True, outcome=True, claimed_shares=100, claimed_winnings=50,
                    fees_collected=1)
        assert check_market_invariants(m, 100, 50) == []

    def test_over_claim_detected(self) -> None:
        m = _market(resolved=True, outcome=False, claimed_shares=51, claimed_winnings=100)
        violations = check_market_invariants(m, 100, 50)
        assert any("claimed_shares=51" in v for v in violations)

    def test_undistributed_remainder_detected(self) -> None:
        m = _market(resolved=True, outcome=True, claimed_shares=100, claimed_winnings=49)
        violations = check_market_invariants(m, 100, 50)
        assert any("undistributed" in v for v in violations)


def _market_row(**kwargs):
    row = MagicMock()
    m = _market(**kwargs)
    for field in (
        "id", "threshold_price", "expiry_time", "creator", "fee_bps", "yes_pool", "no_pool",
        "resolved", "outcome", "oracle_price", "resolved_at", "claimed_shares",
        "claimed_winnings", "fees_collected", "created_at", "updated_at",
    ):
        setattr(row, field, getattr(m, field))
    row.commodity = m.commodity.value
    row.staked_yes = m.yes_pool
    row.staked_no = m.no_pool
    return row


@pytest.mark.asyncio
async def test_service_reports_ok() -> None:
    db = MagicMock()
    markets = MagicMock()
    markets.fetchall.return_value = [_market_row(id=1), _market_row(id=2, yes_pool=10, no_pool=0)]
    custody = MagicMock()
    custody.scalar_one_or_none.return_value = 160
    db.execute = AsyncMock(side_effect=[markets, custody])

    result = await AdminService().verify_all_invariants(db)

    assert result == {"ok": True, "markets_checked": 2, "violations": []}


@pytest.mark.asyncio
async def test_service_detects_custody_mismatch() -> None:
    db = MagicMock()
    markets = MagicMock()
    markets.fetchall.return_value = [_market_row()]
    custody = MagicMock()
    custody.scalar_one_or_none.return_value = 10
    db.execute = AsyncMock(side_effect=[markets, custody])

    result = await AdminService().verify_all_invariants(db)

    assert result["ok"] is False
    assert "custody balance 10" in result["violations"][0]
