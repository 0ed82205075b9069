"""StakingService — stake, odds, payout previews and positions.

stake() runs under the per-market lock and a `SELECT ... FOR UPDATE` on the
market row; the expiry check happens inside that critical section so a stake
can never land after the resolution instant. The asset transfer executes first
and in the same transaction: if it fails nothing is recorded.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_common.datetime_utils import Clock, utc_now
from src.pm_common.enums import Side
from src.pm_common.errors import (
    BelowMinimumStakeError,
    InvalidParametersError,
    MarketClosedError,
    MarketNotFoundError,
)
from src.pm_common.locks import MarketLocks, market_locks
from src.pm_market.domain.models import Market
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_settlement.domain.payout import PayoutBreakdown, calculate_payout
from src.pm_staking.domain.models import (
    MarketStats,
    Odds,
    Position,
    StakeEvent,
    StakeResult,
    compute_odds,
)
from src.pm_staking.domain.repository import PositionRepositoryProtocol
from src.pm_staking.infrastructure.persistence import PositionRepository
from src.pm_transfer.domain.models import AssetTransferProtocol
from src.pm_transfer.infrastructure.account_ledger import AccountLedgerTransfer

logger = logging.getLogger(__name__)


class StakingService:
    def __init__(
        self,
        market_repo: MarketRepositoryProtocol | None = None,
        position_repo: PositionRepositoryProtocol | None = None,
        transfer: AssetTransferProtocol | None = None,
        locks: MarketLocks | None = None,
        clock: Clock = utc_now,
        min_stake: int | None = None,
    ) -> None:
        self._markets: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._positions: PositionRepositoryProtocol = position_repo or PositionRepository()
        self._transfer: AssetTransferProtocol = transfer or AccountLedgerTransfer()
        self._locks = locks or market_locks
        self._clock = clock
        self._min_stake = settings.MIN_STAKE if min_stake is None else min_stake

    async def stake(
        self, db: AsyncSession, market_id: int, user_id: str, side: Side, amount: int
    ) -> StakeResult:
        if amount <= 0:
            raise InvalidParametersError("amount", "must be greater than 0")
        if amount < self._min_stake:
            raise BelowMinimumStakeError(amount, self._min_stake)

        async with self._locks.for_market(market_id):
            try:
                market = await self._markets.get_market_for_update(db, market_id)
                if market is None:
                    raise MarketNotFoundError(market_id)
                if market.resolved:
                    raise MarketClosedError(market_id, "resolved")
                now = self._clock()
                if now >= market.expiry_time:
                    raise MarketClosedError(market_id, "expired")

                receipt = await self._transfer.transfer_in(
                    db, user_id, amount, reference=f"stake:{market_id}"
                )
                updated = await self._markets.add_to_pool(db, market_id, side, amount)
                await self._positions.add_shares(db, market_id, user_id, side, amount)
                await self._positions.append_stake_event(
                    db,
                    StakeEvent(
                        market_id=market_id,
                        user_id=user_id,
                        side=side,
                        amount=amount,
                        shares=amount,
                        created_at=now,
                        transfer_ref=receipt.id,
                    ),
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "Stake accepted: market=%d user=%s side=%s amount=%d pools=%d/%d",
            market_id, user_id, side.value, amount, updated.yes_pool, updated.no_pool,
        )
        return StakeResult(
            shares=amount,
            new_yes_pool=updated.yes_pool,
            new_no_pool=updated.no_pool,
            receipt_id=receipt.id,
        )

    async def get_odds(self, db: AsyncSession, market_id: int) -> Odds:
        market = await self._get_market(db, market_id)
        return compute_odds(market.yes_pool, market.no_pool)

    async def calculate_payout_preview(
        self, db: AsyncSession, market_id: int, side: Side, amount: int
    ) -> PayoutBreakdown:
        """What `amount` staked now on `side` would pay if `side` wins. No mutation."""
        if amount <= 0:
            raise InvalidParametersError("amount", "must be greater than 0")
        market = await self._get_market(db, market_id)
        return calculate_payout(
            user_shares=amount,
            winning_pool=market.pool(side) + amount,
            losing_pool=market.pool(side.opposite),
            fee_bps=market.fee_bps,
        )

    async def get_position(
        self, db: AsyncSession, market_id: int, user_id: str
    ) -> Position:
        await self._get_market(db, market_id)
        position = await self._positions.get_position(db, market_id, user_id)
        return position or Position(market_id=market_id, user_id=user_id)

    async def get_market_stats(self, db: AsyncSession, market_id: int) -> MarketStats:
        await self._get_market(db, market_id)
        return await self._positions.get_market_stats(db, market_id)

    async def _get_market(self, db: AsyncSession, market_id: int) -> Market:
        market = await self._markets.get_market_by_id(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market
