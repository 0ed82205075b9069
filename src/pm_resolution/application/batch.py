"""Batch driver: resolve every expired, unresolved market.

Used by the scheduler endpoint. Each market is resolved in its own DB session
so one failure never poisons the others. Concurrency is bounded by a
semaphore and oracle calls are spaced by a minimum interval. Oracle failures
and per-item timeouts are retried with exponential backoff; any other error
fails only that market.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import settings
from src.pm_common.database import async_session_factory
from src.pm_common.errors import (
    AlreadyResolvedError,
    AppError,
    MarketNotExpiredError,
    OracleUnavailableError,
)
from src.pm_resolution.application.service import ResolutionService
from src.pm_resolution.domain.models import (
    BatchItemResult,
    BatchItemStatus,
    BatchSummary,
)

logger = logging.getLogger(__name__)

_MAX_BACKOFF_SECONDS = 30.0


class ResolutionBatchRunner:
    def __init__(
        self,
        service: ResolutionService,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        concurrency: int | None = None,
        max_attempts: int | None = None,
        backoff_seconds: float | None = None,
        min_interval_seconds: float | None = None,
        item_timeout: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._service = service
        self._session_factory = session_factory or async_session_factory
        self._concurrency = concurrency or settings.RESOLVE_CONCURRENCY
        self._max_attempts = max_attempts or settings.RESOLVE_MAX_ATTEMPTS
        self._backoff = (
            settings.RESOLVE_BACKOFF_SECONDS if backoff_seconds is None else backoff_seconds
        )
        self._min_interval = (
            settings.RESOLVE_MIN_INTERVAL_SECONDS
            if min_interval_seconds is None
            else min_interval_seconds
        )
        self._item_timeout = item_timeout or settings.ORACLE_TIMEOUT_SECONDS * 2 + 5
        self._sleep = sleep
        self._pace_lock = asyncio.Lock()
        self._last_call = float("-inf")

    async def resolve_expired(
        self, db: AsyncSession, limit: int | None = None
    ) -> BatchSummary:
        markets = await self._service.list_expired_unresolved(db, limit)
        if not markets:
            return BatchSummary()

        semaphore = asyncio.Semaphore(self._concurrency)

        async def run(market_id: int) -> BatchItemResult:
            async with semaphore:
                return await self._resolve_one(market_id)

        results = await asyncio.gather(*(run(m.id) for m in markets))
        summary = BatchSummary(results=list(results))
        logger.info(
            "Batch resolution: %d candidates, %d resolved, %d failed, %d skipped",
            len(markets), summary.total_resolved, summary.total_failed, summary.total_skipped,
        )
        return summary

    async def _resolve_one(self, market_id: int) -> BatchItemResult:
        last_error = ""
        for attempt in range(1, self._max_attempts + 1):
            await self._pace()
            try:
                async with self._session_factory() as session:
                    result = await asyncio.wait_for(
                        self._service.resolve(session, market_id), timeout=self._item_timeout
                    )
                return BatchItemResult(
                    market_id, BatchItemStatus.RESOLVED, attempts=attempt, result=result
                )
            except (AlreadyResolvedError, MarketNotExpiredError) as e:
                return BatchItemResult(
                    market_id, BatchItemStatus.SKIPPED, attempts=attempt, error=e.message
                )
            except OracleUnavailableError as e:
                last_error = e.message
            except TimeoutError:
                last_error = f"timed out after {self._item_timeout:.1f}s"
            except AppError as e:
                logger.warning("Market %d not resolved: %s", market_id, e.message)
                return BatchItemResult(
                    market_id, BatchItemStatus.FAILED, attempts=attempt, error=e.message
                )
            except Exception as e:
                logger.exception("Unexpected error resolving market %d", market_id)
                return BatchItemResult(
                    market_id, BatchItemStatus.FAILED, attempts=attempt, error=str(e)
                )

            if attempt < self._max_attempts:
                delay = min(self._backoff * 2 ** (attempt - 1), _MAX_BACKOFF_SECONDS)
                logger.warning(
                    "Market %d attempt %d/%d failed (%s), retrying in %.1fs",
                    market_id, attempt, self._max_attempts, last_error, delay,
                )
                await self._sleep(delay)

        logger.error(
            "Market %d left unresolved after %d attempts: %s",
            market_id, self._max_attempts, last_error,
        )
        return BatchItemResult(
            market_id, BatchItemStatus.FAILED, attempts=self._max_attempts, error=last_error
        )

    async def _pace(self) -> None:
        """Keep at least `min_interval` seconds between oracle-bound attempts."""
        async with self._pace_lock:
            wait = self._last_call + self._min_interval - time.monotonic()
            if wait > 0:
                await self._sleep(wait)
            self._last_call = time.monotonic()
