"""Domain models for pm_market — pure dataclasses plus derived state."""

from dataclasses import dataclass
from datetime import datetime

from src.pm_common.enums import Commodity, MarketState, Side


@dataclass
class Market:
    id: int
    commodity: Commodity
    threshold_price: int            # cents
    expiry_time: datetime
    creator: str
    fee_bps: int
    yes_pool: int = 0
    no_pool: int = 0
    resolved: bool = False
    outcome: bool | None = None     # True = YES won; only meaningful once resolved
    oracle_price: int | None = None
    resolved_at: datetime | None = None
    claimed_shares: int = 0         # winning shares already paid out
    claimed_winnings: int = 0       # losing-pool units already paid out (pre-fee)
    fees_collected: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_pool(self) -> int:
        return self.yes_pool + self.no_pool

    def pool(self, side: Side) -> int:
        return self.yes_pool if side is Side.YES else self.no_pool

    @property
    def winning_side(self) -> Side | None:
        if not self.resolved or self.outcome is None:
            return None
        return Side.YES if self.outcome else Side.NO

    def state(self, now: datetime) -> MarketState:
        if self.resolved:
            return MarketState.RESOLVED
        if now >= self.expiry_time:
            return MarketState.EXPIRED_UNRESOLVED
        return MarketState.OPEN


@dataclass
class MarketEvent:
    id: str
    market_id: int
    event_type: str
    payload: dict[str, object]
    created_at: datetime | None = None
