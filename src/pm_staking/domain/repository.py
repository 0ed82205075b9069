"""Repository Protocol for positions and the stake-event log."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import Side
from src.pm_staking.domain.models import MarketStats, Position, StakeEvent


class PositionRepositoryProtocol(Protocol):
    async def get_position(
        self, db: AsyncSession, market_id: int, user_id: str
    ) -> Position | None: ...

    async def get_position_for_update(
        self, db: AsyncSession, market_id: int, user_id: str
    ) -> Position | None: ...

    async def add_shares(
        self, db: AsyncSession, market_id: int, user_id: str, side: Side, shares: int
    ) -> Position: ...

    async def append_stake_event(
        self, db: AsyncSession, event: StakeEvent
    ) -> StakeEvent: ...

    async def mark_claimed(
        self,
        db: AsyncSession,
        market_id: int,
        user_id: str,
        payout: int,
        claimed_at: datetime,
    ) -> bool: ...

    async def get_market_stats(
        self, db: AsyncSession, market_id: int
    ) -> MarketStats: ...

