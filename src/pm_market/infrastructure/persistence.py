"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Pool and resolution mutations are single atomic UPDATE ... RETURNING statements;
resolution is a compare-and-set on `resolved = FALSE`.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

import json
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Commodity, MarketState, Side
from src.pm_common.errors import InternalError, MarketNotFoundError
from src.pm_market.domain.models import Market, MarketEvent

_MARKET_COLUMNS = """
    id, commodity, threshold_price, expiry_time, creator, fee_bps,
    yes_pool, no_pool, resolved, outcome, oracle_price, resolved_at,
    claimed_shares, claimed_winnings, fees_collected,
    created_at, updated_at
"""

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_INSERT_MARKET_SQL = text(f"""
    INSERT INTO markets
        (commodity, threshold_price, expiry_time, creator, fee_bps, created_at)
    VALUES
        (:commodity, :threshold_price, :expiry_time, :creator, :fee_bps, :created_at)
    RETURNING {_MARKET_COLUMNS}
""")

_GET_MARKET_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE id = :market_id
""")

_GET_MARKET_FOR_UPDATE_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE id = :market_id
    FOR UPDATE
""")

_LIST_MARKETS_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE
        (CAST(:commodity AS TEXT) IS NULL OR commodity = CAST(:commodity AS TEXT))
        AND (
            CAST(:state AS TEXT) IS NULL
            OR (CAST(:state AS TEXT) = 'RESOLVED' AND resolved = TRUE)
            OR (CAST(:state AS TEXT) = 'OPEN' AND resolved = FALSE AND expiry_time > :now)
            OR (CAST(:state AS TEXT) = 'EXPIRED_UNRESOLVED'
                AND resolved = FALSE AND expiry_time <= :now)
        )
        AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
    ORDER BY id DESC
    LIMIT :limit
""")

_LIST_EXPIRED_UNRESOLVED_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE resolved = FALSE AND expiry_time <= :now
    ORDER BY expiry_time ASC, id ASC
    LIMIT :limit
""")

_ADD_YES_POOL_SQL = text(f"""
    UPDATE markets
    SET yes_pool = yes_pool + :amount
    WHERE id = :market_id AND resolved = FALSE
    RETURNING {_MARKET_COLUMNS}
""")

_ADD_NO_POOL_SQL = text(f"""
    UPDATE markets
    SET no_pool = no_pool + :amount
    WHERE id = :market_id AND resolved = FALSE
    RETURNING {_MARKET_COLUMNS}
""")

_MARK_RESOLVED_SQL = text("""
    UPDATE markets
    SET resolved = TRUE,
        outcome = :outcome,
        oracle_price = :oracle_price,
        resolved_at = :resolved_at
    WHERE id = :market_id AND resolved = FALSE
    RETURNING id
""")

_RECORD_CLAIM_SQL = text(f"""
    UPDATE markets
    SET claimed_shares = claimed_shares + :shares,
        claimed_winnings = claimed_winnings + :winnings,
        fees_collected = fees_collected + :fee
    WHERE id = :market_id AND resolved = TRUE
    RETURNING {_MARKET_COLUMNS}
""")

_INSERT_EVENT_SQL = text("""
    INSERT INTO market_events (id, market_id, event_type, payload)
    VALUES (:id, :market_id, :event_type, :payload)
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------

def row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        commodity=Commodity(row.commodity),  # type: ignore[attr-defined]
        threshold_price=row.threshold_price,  # type: ignore[attr-defined]
        expiry_time=row.expiry_time,  # type: ignore[attr-defined]
        creator=row.creator,  # type: ignore[attr-defined]
        fee_bps=row.fee_bps,  # type: ignore[attr-defined]
        yes_pool=row.yes_pool,  # type: ignore[attr-defined]
        no_pool=row.no_pool,  # type: ignore[attr-defined]
        resolved=row.resolved,  # type: ignore[attr-defined]
        outcome=row.outcome,  # type: ignore[attr-defined]
        oracle_price=row.oracle_price,  # type: ignore[attr-defined]
        resolved_at=row.resolved_at,  # type: ignore[attr-defined]
        claimed_shares=row.claimed_shares,  # type: ignore[attr-defined]
        claimed_winnings=row.claimed_winnings,  # type: ignore[attr-defined]
        fees_collected=row.fees_collected,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    """Concrete repository — every mutation is atomic at the SQL level."""

    async def create_market(
        self,
        db: AsyncSession,
        commodity: Commodity,
        threshold_price: int,
        expiry_time: datetime,
        creator: str,
        fee_bps: int,
        created_at: datetime,
    ) -> Market:
        result = await db.execute(
            _INSERT_MARKET_SQL,
            {
                "commodity": commodity.value,
                "threshold_price": threshold_price,
                "expiry_time": expiry_time,
                "creator": creator,
                "fee_bps": fee_bps,
                "created_at": created_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Market insert returned no rows")
        return row_to_market(row)

    async def get_market_by_id(
        self, db: AsyncSession, market_id: int
    ) -> Market | None:
        result = await db.execute(_GET_MARKET_SQL, {"market_id": market_id})
        row = result.fetchone()
        return row_to_market(row) if row else None

    async def get_market_for_update(
        self, db: AsyncSession, market_id: int
    ) -> Market | None:
        result = await db.execute(_GET_MARKET_FOR_UPDATE_SQL, {"market_id": market_id})
        row = result.fetchone()
        return row_to_market(row) if row else None

    async def list_markets(
        self,
        db: AsyncSession,
        commodity: Commodity | None,
        state: MarketState | None,
        now: datetime,
        cursor_id: int | None,
        limit: int,
    ) -> list[Market]:
        result = await db.execute(
            _LIST_MARKETS_SQL,
            {
                "commodity": commodity.value if commodity else None,
                "state": state.value if state else None,
                "now": now,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [row_to_market(row) for row in result.fetchall()]

    async def list_expired_unresolved(
        self, db: AsyncSession, now: datetime, limit: int
    ) -> list[Market]:
        result = await db.execute(
            _LIST_EXPIRED_UNRESOLVED_SQL, {"now": now, "limit": limit}
        )
        return [row_to_market(row) for row in result.fetchall()]

    async def add_to_pool(
        self, db: AsyncSession, market_id: int, side: Side, amount: int
    ) -> Market:
        sql = _ADD_YES_POOL_SQL if side is Side.YES else _ADD_NO_POOL_SQL
        result = await db.execute(sql, {"market_id": market_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise MarketNotFoundError(market_id)
        return row_to_market(row)

    async def mark_resolved(
        self,
        db: AsyncSession,
        market_id: int,
        outcome: bool,
        oracle_price: int,
        resolved_at: datetime,
    ) -> bool:
        result = await db.execute(
            _MARK_RESOLVED_SQL,
            {
                "market_id": market_id,
                "outcome": outcome,
                "oracle_price": oracle_price,
                "resolved_at": resolved_at,
            },
        )
        return result.fetchone() is not None

    async def record_claim(
        self,
        db: AsyncSession,
        market_id: int,
        shares: int,
        winnings: int,
        fee: int,
    ) -> Market:
        result = await db.execute(
            _RECORD_CLAIM_SQL,
            {"market_id": market_id, "shares": shares, "winnings": winnings, "fee": fee},
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Claim accounting failed for market {market_id}")
        return row_to_market(row)

    async def append_event(self, db: AsyncSession, event: MarketEvent) -> None:
        await db.execute(
            _INSERT_EVENT_SQL,
            {
                "id": event.id,
                "market_id": event.market_id,
                "event_type": event.event_type,
                "payload": json.dumps(event.payload),
            },
        )
