"""Price oracle collaborator — quote model, interface and quote validation."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from src.pm_common.enums import Commodity
from src.pm_common.errors import OracleUnavailableError

# Tolerated drift between the feed's clock and ours
MAX_CLOCK_SKEW = timedelta(seconds=60)


@dataclass(frozen=True)
class PriceQuote:
    commodity: Commodity
    price: int          # cents
    confidence: int     # 0..100
    timestamp: datetime


class PriceOracleProtocol(Protocol):
    async def get_price(self, commodity: Commodity) -> PriceQuote:
        """Current resolving price. Raises OracleUnavailableError on timeout/error."""
        ...


def validate_quote(
    quote: PriceQuote, now: datetime, max_age_seconds: int, min_confidence: int
) -> PriceQuote:
    """Reject quotes that must not resolve a market.

    Non-positive, low-confidence, stale and future-dated quotes all raise
    OracleUnavailableError, leaving the market retryable.
    """
    symbol = quote.commodity.value
    if quote.price <= 0:
        raise OracleUnavailableError(symbol, f"invalid price {quote.price}")
    if not (0 <= quote.confidence <= 100):
        raise OracleUnavailableError(symbol, f"invalid confidence {quote.confidence}")
    if quote.confidence < min_confidence:
        raise OracleUnavailableError(
            symbol, f"confidence {quote.confidence} below {min_confidence}"
        )
    if now - quote.timestamp > timedelta(seconds=max_age_seconds):
        raise OracleUnavailableError(
            symbol, f"stale price from {quote.timestamp.isoformat()}"
        )
    if quote.timestamp - now > MAX_CLOCK_SKEW:
        raise OracleUnavailableError(
            symbol, f"price dated in the future: {quote.timestamp.isoformat()}"
        )
    return quote
