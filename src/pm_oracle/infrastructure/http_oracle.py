"""HTTP price-feed adapter for PriceOracleProtocol.

Expected feed response for GET {base_url}/prices/{COMMODITY}:

    {"commodity": "COFFEE", "price_cents": 247, "confidence": 95, "timestamp": 1760000000}

`price` in dollars (e.g. 2.47) is accepted when `price_cents` is absent and is
rounded half-up to cents. Any transport error, non-2xx status, timeout or
malformed body surfaces as OracleUnavailableError.
"""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

import httpx

from config.settings import settings
from src.pm_common.enums import Commodity
from src.pm_common.errors import OracleUnavailableError
from src.pm_oracle.domain.models import PriceQuote

logger = logging.getLogger(__name__)


class HttpPriceOracle:
    """Client for the commodity price feed."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.ORACLE_BASE_URL).rstrip("/")
        key = settings.ORACLE_API_KEY if api_key is None else api_key
        headers = {"Authorization": f"Bearer {key}"} if key else {}
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.ORACLE_TIMEOUT_SECONDS,
            headers=headers,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def get_price(self, commodity: Commodity) -> PriceQuote:
        try:
            response = await self._client.get(f"{self.base_url}/prices/{commodity.value}")
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            logger.warning("Oracle timeout for %s", commodity.value)
            raise OracleUnavailableError(commodity.value, "timeout") from None
        except httpx.HTTPStatusError as e:
            raise OracleUnavailableError(
                commodity.value, f"HTTP {e.response.status_code}"
            ) from None
        except (httpx.HTTPError, ValueError) as e:
            raise OracleUnavailableError(commodity.value, str(e) or type(e).__name__) from None

        return _parse_quote(commodity, data)


def _parse_quote(commodity: Commodity, data: Any) -> PriceQuote:
    try:
        if "price_cents" in data:
            price = int(data["price_cents"])
        else:
            price = int(
                (Decimal(str(data["price"])) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            )
        confidence = int(data["confidence"])
        timestamp = datetime.fromtimestamp(int(data["timestamp"]), tz=timezone.utc)
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise OracleUnavailableError(commodity.value, f"malformed response: {e}") from None
    return PriceQuote(
        commodity=commodity, price=price, confidence=confidence, timestamp=timestamp
    )
