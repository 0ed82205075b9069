"""Unit tests for Market derived state."""

from datetime import UTC, datetime, timedelta

from src.pm_common.enums import Commodity, MarketState, Side
from src.pm_market.domain.models import Market

NOW = datetime(2026, 3, 1, tzinfo=UTC)


def _market(**kwargs) -> Market:
    defaults = dict(
        id=1,
        commodity=Commodity.GOLD,
        threshold_price=200000,
        expiry_time=NOW + timedelta(hours=1),
        creator="u1",
        fee_bps=200,
    )
    defaults.update(kwargs)
    return Market(**defaults)


def test_open_before_expiry() -> None:
    assert _market().state(NOW) is MarketState.OPEN


def test_expired_unresolved_at_expiry_instant() -> None:
    m = _market(expiry_time=NOW)
    assert m.state(NOW) is MarketState.EXPIRED_UNRESOLVED


def test_resolved_is_terminal() -> None:
    m = _market(expiry_time=NOW - timedelta(hours=1), resolved=True, outcome=False)
    assert m.state(NOW) is MarketState.RESOLVED
    assert m.winning_side is Side.NO


def test_winning_side_none_until_resolved() -> None:
    assert _market(outcome=True).winning_side is None


def test_pools() -> None:
    m = _market(yes_pool=100, no_pool=50)
    assert m.total_pool == 150
    assert m.pool(Side.YES) == 100
    assert m.pool(Side.NO) == 50
