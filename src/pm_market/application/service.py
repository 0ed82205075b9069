"""MarketApplicationService — Market Ledger operations.

create_market commits its own transaction; the rest are read-only.
Callers that need the domain object (staking, resolution, settlement) use
get_market_or_raise; routers use the schema-returning methods.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_common.datetime_utils import Clock, utc_now
from src.pm_common.enums import Commodity, MarketEventType, MarketState
from src.pm_common.errors import InvalidParametersError, MarketNotFoundError
from src.pm_common.id_generator import generate_id
from src.pm_market.application.schemas import (
    MarketDetail,
    MarketListResponse,
    cursor_decode,
    cursor_encode,
)
from src.pm_market.domain.models import Market, MarketEvent
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository

logger = logging.getLogger(__name__)


class MarketApplicationService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol | None = None,
        clock: Clock = utc_now,
        fee_bps: int | None = None,
    ) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._clock = clock
        self._fee_bps = settings.PLATFORM_FEE_BPS if fee_bps is None else fee_bps

    def now(self) -> datetime:
        return self._clock()

    async def create_market(
        self,
        db: AsyncSession,
        commodity: Commodity | str,
        threshold_price: int,
        expiry_time: datetime,
        creator: str,
    ) -> Market:
        now = self._clock()
        try:
            commodity = Commodity(commodity)
        except ValueError:
            raise InvalidParametersError("commodity", f"unsupported symbol {commodity!r}") from None
        if threshold_price <= 0:
            raise InvalidParametersError("threshold_price", "must be greater than 0")
        if expiry_time.tzinfo is None:
            raise InvalidParametersError("expiry_time", "must be timezone-aware")
        if expiry_time <= now:
            raise InvalidParametersError("expiry_time", "must be in the future")

        try:
            market = await self._repo.create_market(
                db, commodity, threshold_price, expiry_time, creator, self._fee_bps, now
            )
            await self._repo.append_event(
                db,
                MarketEvent(
                    id=generate_id("evt_"),
                    market_id=market.id,
                    event_type=MarketEventType.MARKET_CREATED.value,
                    payload={
                        "commodity": commodity.value,
                        "threshold_price": threshold_price,
                        "expiry_time": expiry_time.isoformat(),
                        "creator": creator,
                    },
                ),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Market created: id=%d commodity=%s threshold=%d cents expiry=%s",
            market.id, commodity.value, threshold_price, expiry_time.isoformat(),
        )
        return market

    async def get_market_or_raise(self, db: AsyncSession, market_id: int) -> Market:
        market = await self._repo.get_market_by_id(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market

    async def get_market(self, db: AsyncSession, market_id: int) -> MarketDetail:
        market = await self.get_market_or_raise(db, market_id)
        return MarketDetail.from_domain(market, self._clock())

    async def list_markets(
        self,
        db: AsyncSession,
        commodity: Commodity | None,
        state: MarketState | None,
        cursor: str | None,
        limit: int,
    ) -> MarketListResponse:
        now = self._clock()
        cursor_id = cursor_decode(cursor)

        markets = await self._repo.list_markets(
            db, commodity, state, now, cursor_id, limit + 1
        )
        has_more = len(markets) > limit
        page = markets[:limit]
        next_cursor = cursor_encode(page[-1]) if has_more and page else None

        items = [MarketDetail.from_domain(m, now) for m in page]
        return MarketListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def list_expired_unresolved(
        self, db: AsyncSession, limit: int | None = None
    ) -> list[Market]:
        return await self._repo.list_expired_unresolved(
            db, self._clock(), limit or settings.RESOLVE_BATCH_LIMIT
        )
