"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Commodity, MarketState, Side
from src.pm_market.domain.models import Market, MarketEvent


class MarketRepositoryProtocol(Protocol):
    async def create_market(
        self,
        db: AsyncSession,
        commodity: Commodity,
        threshold_price: int,
        expiry_time: datetime,
        creator: str,
        fee_bps: int,
        created_at: datetime,
    ) -> Market: ...

    async def get_market_by_id(
        self, db: AsyncSession, market_id: int
    ) -> Market | None: ...

    async def get_market_for_update(
        self, db: AsyncSession, market_id: int
    ) -> Market | None: ...

    async def list_markets(
        self,
        db: AsyncSession,
        commodity: Commodity | None,
        state: MarketState | None,
        now: datetime,
        cursor_id: int | None,
        limit: int,
    ) -> list[Market]: ...

    async def list_expired_unresolved(
        self, db: AsyncSession, now: datetime, limit: int
    ) -> list[Market]: ...

    async def add_to_pool(
        self, db: AsyncSession, market_id: int, side: Side, amount: int
    ) -> Market: ...

    async def mark_resolved(
        self,
        db: AsyncSession,
        market_id: int,
        outcome: bool,
        oracle_price: int,
        resolved_at: datetime,
    ) -> bool: ...

    async def record_claim(
        self,
        db: AsyncSession,
        market_id: int,
        shares: int,
        winnings: int,
        fee: int,
    ) -> Market: ...

    async def append_event(
        self, db: AsyncSession, event: MarketEvent
    ) -> None: ...