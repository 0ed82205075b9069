"""PositionRepository — positions and stake_events with raw text() SQL.

Share increments are an upsert (INSERT ... ON CONFLICT DO UPDATE), so a
position row is created zeroed on a user's first stake and updated after.
Claiming is a compare-and-set on `claimed = FALSE`: a result of 0 rows means
another claim already won.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Side
from src.pm_common.errors import InternalError
from src.pm_staking.domain.models import MarketStats, Position, StakeEvent

_POSITION_COLUMNS = """
    market_id, user_id, yes_shares, no_shares, claimed, payout, claimed_at,
    created_at, updated_at
"""

# ---------------------------------------------------------------------------
# SQL: positions
# ---------------------------------------------------------------------------

_GET_POSITION_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE market_id = :market_id AND user_id = :user_id
""")

_GET_POSITION_FOR_UPDATE_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE market_id = :market_id AND user_id = :user_id
    FOR UPDATE
""")

_ADD_YES_SHARES_SQL = text(f"""
    INSERT INTO positions (market_id, user_id, yes_shares)
    VALUES (:market_id, :user_id, :shares)
    ON CONFLICT (market_id, user_id) DO UPDATE
        SET yes_shares = positions.yes_shares + EXCLUDED.yes_shares
    RETURNING {_POSITION_COLUMNS}
""")

_ADD_NO_SHARES_SQL = text(f"""
    INSERT INTO positions (market_id, user_id, no_shares)
    VALUES (:market_id, :user_id, :shares)
    ON CONFLICT (market_id, user_id) DO UPDATE
        SET no_shares = positions.no_shares + EXCLUDED.no_shares
    RETURNING {_POSITION_COLUMNS}
""")

_MARK_CLAIMED_SQL = text("""
    UPDATE positions
    SET claimed = TRUE,
        payout = :payout,
        claimed_at = :claimed_at
    WHERE market_id = :market_id AND user_id = :user_id AND claimed = FALSE
    RETURNING market_id
""")

# ---------------------------------------------------------------------------
# SQL: stake_events
# ---------------------------------------------------------------------------

_INSERT_STAKE_EVENT_SQL = text("""
    INSERT INTO stake_events
        (market_id, user_id, side, amount, shares, transfer_ref, created_at)
    VALUES
        (:market_id, :user_id, :side, :amount, :shares, :transfer_ref, :created_at)
    RETURNING id
""")

_MARKET_STATS_SQL = text("""
    SELECT
        COUNT(*) AS stake_count,
        COALESCE(SUM(amount), 0) AS total_volume,
        COALESCE(SUM(amount) FILTER (WHERE side = 'YES'), 0) AS yes_volume,
        COALESCE(SUM(amount) FILTER (WHERE side = 'NO'), 0) AS no_volume,
        COUNT(DISTINCT user_id) AS participants,
        COUNT(DISTINCT user_id) FILTER (WHERE side = 'YES') AS yes_participants,
        COUNT(DISTINCT user_id) FILTER (WHERE side = 'NO') AS no_participants
    FROM stake_events
    WHERE market_id = :market_id
""")


def _row_to_position(row: object) -> Position:
    return Position(
        market_id=row.market_id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        yes_shares=row.yes_shares,  # type: ignore[attr-defined]
        no_shares=row.no_shares,  # type: ignore[attr-defined]
        claimed=row.claimed,  # type: ignore[attr-defined]
        payout=row.payout,  # type: ignore[attr-defined]
        claimed_at=row.claimed_at,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class PositionRepository:
    """Concrete repository; every mutation is a single atomic statement."""

    async def get_position(
        self, db: AsyncSession, market_id: int, user_id: str
    ) -> Position | None:
        result = await db.execute(
            _GET_POSITION_SQL, {"market_id": market_id, "user_id": user_id}
        )
        row = result.fetchone()
        return _row_to_position(row) if row else None

    async def get_position_for_update(
        self, db: AsyncSession, market_id: int, user_id: str
    ) -> Position | None:
        result = await db.execute(
            _GET_POSITION_FOR_UPDATE_SQL, {"market_id": market_id, "user_id": user_id}
        )
        row = result.fetchone()
        return _row_to_position(row) if row else None

    async def add_shares(
        self, db: AsyncSession, market_id: int, user_id: str, side: Side, shares: int
    ) -> Position:
        sql = _ADD_YES_SHARES_SQL if side is Side.YES else _ADD_NO_SHARES_SQL
        result = await db.execute(
            sql, {"market_id": market_id, "user_id": user_id, "shares": shares}
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Position upsert returned no rows")
        return _row_to_position(row)

    async def append_stake_event(
        self, db: AsyncSession, event: StakeEvent
    ) -> StakeEvent:
        result = await db.execute(
            _INSERT_STAKE_EVENT_SQL,
            {
                "market_id": event.market_id,
                "user_id": event.user_id,
                "side": event.side.value,
                "amount": event.amount,
                "shares": event.shares,
                "transfer_ref": event.transfer_ref,
                "created_at": event.created_at,
            },
        )
        event.id = result.scalar_one()
        return event

    async def mark_claimed(
        self,
        db: AsyncSession,
        market_id: int,
        user_id: str,
        payout: int,
        claimed_at: datetime,
    ) -> bool:
        result = await db.execute(
            _MARK_CLAIMED_SQL,
            {
                "market_id": market_id,
                "user_id": user_id,
                "payout": payout,
                "claimed_at": claimed_at,
            },
        )
        return result.fetchone() is not None

    async def get_market_stats(
        self, db: AsyncSession, market_id: int
    ) -> MarketStats:
        row = (await db.execute(_MARKET_STATS_SQL, {"market_id": market_id})).fetchone()
        if row is None:
            return MarketStats(market_id, 0, 0, 0, 0, 0, 0, 0)
        return MarketStats(
            market_id=market_id,
            total_volume=int(row.total_volume),
            yes_volume=int(row.yes_volume),
            no_volume=int(row.no_volume),
            stake_count=int(row.stake_count),
            participants=int(row.participants),
            yes_participants=int(row.yes_participants),
            no_participants=int(row.no_participants),
        )
