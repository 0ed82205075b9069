"""ResolutionService — settle an expired market against the price oracle.

Flow (see resolve()):
  1. Read the market without locking; reject unknown, already-resolved and
     not-yet-expired markets before touching the oracle.
  2. Query the oracle outside any lock, bounded by a timeout, and validate
     the quote (positive, fresh, confident enough).
  3. Under the per-market lock and `SELECT ... FOR UPDATE`, flip
     `resolved` with a compare-and-set and append the MARKET_RESOLVED event.

Any failure leaves the market EXPIRED_UNRESOLVED and retryable.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_common.datetime_utils import Clock, utc_now
from src.pm_common.enums import Commodity, MarketEventType, Side
from src.pm_common.errors import (
    AlreadyResolvedError,
    MarketNotExpiredError,
    MarketNotFoundError,
    OracleUnavailableError,
)
from src.pm_common.id_generator import generate_id
from src.pm_common.locks import MarketLocks, market_locks
from src.pm_market.domain.models import Market, MarketEvent
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.persistence import MarketRepository
from src.pm_oracle.domain.models import PriceOracleProtocol, PriceQuote, validate_quote
from src.pm_oracle.infrastructure.http_oracle import HttpPriceOracle
from src.pm_resolution.domain.models import ResolveResult
from src.pm_resolution.domain.outcome import determine_outcome

logger = logging.getLogger(__name__)


class ResolutionService:
    def __init__(
        self,
        market_repo: MarketRepositoryProtocol | None = None,
        oracle: PriceOracleProtocol | None = None,
        locks: MarketLocks | None = None,
        clock: Clock = utc_now,
        oracle_timeout: float | None = None,
        max_age_seconds: int | None = None,
        min_confidence: int | None = None,
    ) -> None:
        self._markets: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._oracle: PriceOracleProtocol = oracle or HttpPriceOracle()
        self._locks = locks or market_locks
        self._clock = clock
        self._oracle_timeout = oracle_timeout or settings.ORACLE_TIMEOUT_SECONDS
        self._max_age = (
            settings.ORACLE_MAX_AGE_SECONDS if max_age_seconds is None else max_age_seconds
        )
        self._min_confidence = (
            settings.ORACLE_MIN_CONFIDENCE if min_confidence is None else min_confidence
        )

    @property
    def oracle(self) -> PriceOracleProtocol:
        return self._oracle

    async def resolve(self, db: AsyncSession, market_id: int) -> ResolveResult:
        market = await self._markets.get_market_by_id(db, market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        if market.resolved:
            raise AlreadyResolvedError(market_id)
        if self._clock() < market.expiry_time:
            raise MarketNotExpiredError(market_id)

        quote = await self._fetch_quote(market.commodity)
        outcome = determine_outcome(quote.price, market.threshold_price)
        receipt_id = generate_id("res_")

        async with self._locks.for_market(market_id):
            try:
                locked = await self._markets.get_market_for_update(db, market_id)
                if locked is None:
                    raise MarketNotFoundError(market_id)
                if locked.resolved:
                    raise AlreadyResolvedError(market_id)

                resolved_at = self._clock()
                won = await self._markets.mark_resolved(
                    db, market_id, outcome, quote.price, resolved_at
                )
                if not won:
                    raise AlreadyResolvedError(market_id)
                await self._markets.append_event(
                    db, _resolved_event(receipt_id, locked, quote, outcome)
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "Market resolved: id=%d commodity=%s price=%d threshold=%d outcome=%s receipt=%s",
            market_id, market.commodity.value, quote.price, market.threshold_price,
            "YES" if outcome else "NO", receipt_id,
        )
        return ResolveResult(
            market_id=market_id,
            outcome=outcome,
            oracle_price=quote.price,
            receipt_id=receipt_id,
            resolved_at=resolved_at,
        )

    async def list_expired_unresolved(
        self, db: AsyncSession, limit: int | None = None
    ) -> list[Market]:
        return await self._markets.list_expired_unresolved(
            db, self._clock(), limit or settings.RESOLVE_BATCH_LIMIT
        )

    async def _fetch_quote(self, commodity: Commodity) -> PriceQuote:
        try:
            quote = await asyncio.wait_for(
                self._oracle.get_price(commodity), timeout=self._oracle_timeout
            )
            return validate_quote(quote, self._clock(), self._max_age, self._min_confidence)
        except TimeoutError:
            logger.warning("Oracle timed out after %.1fs for %s", self._oracle_timeout, commodity.value)
            raise OracleUnavailableError(commodity.value, "timeout") from None
        except OracleUnavailableError as e:
            logger.warning("Oracle rejected for %s: %s", commodity.value, e.details.get("reason"))
            raise


def _resolved_event(
    receipt_id: str, market: Market, quote: PriceQuote, outcome: bool
) -> MarketEvent:
    return MarketEvent(
        id=receipt_id,
        market_id=market.id,
        event_type=MarketEventType.MARKET_RESOLVED.value,
        payload={
            "outcome": (Side.YES if outcome else Side.NO).value,
            "oracle_price": quote.price,
            "threshold_price": market.threshold_price,
            "confidence": quote.confidence,
            "quote_timestamp": quote.timestamp.isoformat(),
            "yes_pool": market.yes_pool,
            "no_pool": market.no_pool,
        },
    )
