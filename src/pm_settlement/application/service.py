"""SettlementService — pay out a winning position exactly once.

claim() runs under the per-market lock and row locks on the market and the
position. Funds move first (user payout, then platform fee); the position's
`claimed` flag is flipped last with a compare-and-set, so a failed transfer
or a lost race rolls everything back and leaves the position claimable.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.datetime_utils import Clock, utc_now
from src.pm_common.enums import MarketEventType
from src.pm_common.errors import (
    AlreadyClaimedError,
    MarketNotFoundError,
    NoWinningPositionError,
    NotResolvedError,
)
from src.pm_common.id_generator import generate_id
from src.pm_common.locks import MarketLocks, market_locks
from src.pm_market.domain.models import MarketEvent
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_settlement.domain.models import ClaimResult
from src.pm_settlement.domain.payout import calculate_claim_payout
from src.pm_staking.domain.repository import PositionRepositoryProtocol
from src.pm_staking.infrastructure.persistence import PositionRepository
from src.pm_transfer.domain.models import PLATFORM_FEE_USER_ID, AssetTransferProtocol
from src.pm_transfer.infrastructure.account_ledger import AccountLedgerTransfer

logger = logging.getLogger(__name__)


class SettlementService:
    def __init__(
        self,
        market_repo: MarketRepositoryProtocol | None = None,
        position_repo: PositionRepositoryProtocol | None = None,
        transfer: AssetTransferProtocol | None = None,
        locks: MarketLocks | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._markets: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._positions: PositionRepositoryProtocol = position_repo or PositionRepository()
        self._transfer: AssetTransferProtocol = transfer or AccountLedgerTransfer()
        self._locks = locks or market_locks
        self._clock = clock

    async def claim(self, db: AsyncSession, market_id: int, user_id: str) -> ClaimResult:
        async with self._locks.for_market(market_id):
            try:
                market = await self._markets.get_market_for_update(db, market_id)
                if market is None:
                    raise MarketNotFoundError(market_id)
                side = market.winning_side
                if side is None:
                    raise NotResolvedError(market_id)

                position = await self._positions.get_position_for_update(db, market_id, user_id)
                if position is None or position.shares(side) <= 0:
                    raise NoWinningPositionError(market_id, user_id)
                if position.claimed:
                    raise AlreadyClaimedError(market_id, user_id)

                shares = position.shares(side)
                payout = calculate_claim_payout(
                    user_shares=shares,
                    winning_pool=market.pool(side),
                    losing_pool=market.pool(side.opposite),
                    fee_bps=market.fee_bps,
                    claimed_shares=market.claimed_shares,
                    claimed_winnings=market.claimed_winnings,
                )

                reference = f"claim:{market_id}"
                receipt = await self._transfer.transfer_out(db, user_id, payout.net, reference)
                if payout.fee > 0:
                    await self._transfer.transfer_out(
                        db, PLATFORM_FEE_USER_ID, payout.fee, f"fee:{market_id}"
                    )

                claimed_at = self._clock()
                if not await self._positions.mark_claimed(
                    db, market_id, user_id, payout.net, claimed_at
                ):
                    raise AlreadyClaimedError(market_id, user_id)
                await self._markets.record_claim(
                    db, market_id, shares, payout.winnings, payout.fee
                )
                await self._markets.append_event(
                    db,
                    MarketEvent(
                        id=generate_id("evt_"),
                        market_id=market_id,
                        event_type=MarketEventType.POSITION_CLAIMED.value,
                        payload={
                            "user_id": user_id,
                            "side": side.value,
                            "shares": shares,
                            "winnings": payout.winnings,
                            "fee": payout.fee,
                            "payout": payout.net,
                            "receipt_id": receipt.id,
                        },
                    ),
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "Claim paid: market=%d user=%s side=%s shares=%d winnings=%d fee=%d net=%d",
            market_id, user_id, side.value, shares, payout.winnings, payout.fee, payout.net,
        )
        return ClaimResult(
            market_id=market_id,
            user_id=user_id,
            side=side,
            shares=shares,
            payout=payout,
            receipt_id=receipt.id,
            claimed_at=claimed_at,
        )
