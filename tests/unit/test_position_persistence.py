"""Unit tests for PositionRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_common.enums import Side
from src.pm_staking.domain.models import StakeEvent
from src.pm_staking.infrastructure.persistence import PositionRepository

NOW = datetime(2026, 3, 1, tzinfo=UTC)


def _make_position_row(**kwargs):
    row = MagicMock()
    row.market_id = kwargs.get("market_id", 1)
    row.user_id = kwargs.get("user_id", "alice")
    row.yes_shares = kwargs.get("yes_shares", 0)
    row.no_shares = kwargs.get("no_shares", 0)
    row.claimed = kwargs.get("claimed", False)
    row.payout = None
    row.claimed_at = None
    row.created_at = NOW
    row.updated_at = NOW
    return row


@pytest.fixture
def db():
    return MagicMock()


@pytest.mark.asyncio
async def test_add_yes_shares_upserts(db):
    result = MagicMock()
    result.fetchone.return_value = _make_position_row(yes_shares=15)
    db.execute = AsyncMock(return_value=result)

    position = await PositionRepository().add_shares(db, 1, "alice", Side.YES, 15)

    assert position.yes_shares == 15
    sql = str(db.execute.call_args[0][0])
    assert "ON CONFLICT (market_id, user_id)" in sql
    assert "yes_shares = positions.yes_shares + EXCLUDED.yes_shares" in sql


@pytest.mark.asyncio
async def test_get_position_none(db):
    result = MagicMock()
    result.fetchone.return_value = None
    db.execute = AsyncMock(return_value=result)
    assert await PositionRepository().get_position(db, 1, "alice") is None


@pytest.mark.asyncio
async def test_append_stake_event_assigns_id(db):
    result = MagicMock()
    result.scalar_one.return_value = 42
    db.execute = AsyncMock(return_value=result)
    event = StakeEvent(
        market_id=1, user_id="alice", side=Side.NO, amount=5, shares=5, created_at=NOW,
        transfer_ref="rcpt_1",
    )

    stored = await PositionRepository().append_stake_event(db, event)

    assert stored.id == 42
    params = db.execute.call_args[0][1]
    assert params["side"] == "NO"
    assert params["transfer_ref"] == "rcpt_1"


@pytest.mark.asyncio
async def test_mark_claimed_compare_and_set(db):
    won = MagicMock()
    won.fetchone.return_value = MagicMock(market_id=1)
    lost = MagicMock()
    lost.fetchone.return_value = None
    db.execute = AsyncMock(side_effect=[won, lost])
    repo = PositionRepository()

    assert await repo.mark_claimed(db, 1, "alice", 149, NOW) is True
    assert await repo.mark_claimed(db, 1, "alice", 149, NOW) is False
    assert "claimed = FALSE" in str(db.execute.call_args[0][0])


@pytest.mark.asyncio
async def test_market_stats(db):
    row = MagicMock(
        stake_count=3, total_volume=35, yes_volume=15, no_volume=20,
        participants=2, yes_participants=1, no_participants=1,
    )
    result = MagicMock()
    result.fetchone.return_value = row
    db.execute = AsyncMock(return_value=result)

    stats = await PositionRepository().get_market_stats(db, 1)

    assert stats.total_volume == 35
    assert stats.participants == 2
