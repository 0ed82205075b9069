"""Pydantic schemas for pm_market API requests and responses.

Cursor format for markets (BIGSERIAL PK, keyset by id):
  {"id": <last market id>} encoded as Base64 JSON string.
"""

import base64
import json
from datetime import datetime

from pydantic import BaseModel, Field

from src.pm_common.cents import cents_to_display
from src.pm_common.datetime_utils import to_unix
from src.pm_common.enums import Commodity, MarketState
from src.pm_market.domain.models import Market

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_market: Market) -> str:
    """Encode cursor from last market in page."""
    return base64.b64encode(json.dumps({"id": last_market.id}).encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode cursor -> market_id, or None on error."""
    if cursor is None:
        return None
    try:
        return int(json.loads(base64.b64decode(cursor.encode()).decode())["id"])
    except Exception:
        return None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    commodity: Commodity
    threshold_price: int = Field(..., description="Threshold in cents, must be > 0")
    expiry_time: datetime = Field(..., description="ISO-8601 or Unix seconds")


# ---------------------------------------------------------------------------
# Market detail
# ---------------------------------------------------------------------------


class MarketDetail(BaseModel):
    id: int
    commodity: str
    threshold_price_cents: int
    threshold_price_display: str
    expiry_time: str
    expiry_ts: int
    state: MarketState
    creator: str
    fee_bps: int
    yes_pool: int
    no_pool: int
    total_pool: int
    total_pool_display: str
    resolved: bool
    outcome: str | None
    oracle_price_cents: int | None
    resolved_at: str | None
    created_at: str | None

    @classmethod
    def from_domain(cls, m: Market, now: datetime) -> "MarketDetail":
        winning = m.winning_side
        return cls(
            id=m.id,
            commodity=m.commodity.value,
            threshold_price_cents=m.threshold_price,
            threshold_price_display=cents_to_display(m.threshold_price),
            expiry_time=m.expiry_time.isoformat(),
            expiry_ts=to_unix(m.expiry_time),  # type: ignore[arg-type]
            state=m.state(now),
            creator=m.creator,
            fee_bps=m.fee_bps,
            yes_pool=m.yes_pool,
            no_pool=m.no_pool,
            total_pool=m.total_pool,
            total_pool_display=cents_to_display(m.total_pool),
            resolved=m.resolved,
            outcome=winning.value if winning else None,
            oracle_price_cents=m.oracle_price,
            resolved_at=m.resolved_at.isoformat() if m.resolved_at else None,
            created_at=m.created_at.isoformat() if m.created_at else None,
        )


class MarketListResponse(BaseModel):
    items: list[MarketDetail]
    next_cursor: str | None
    has_more: bool
