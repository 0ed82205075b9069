"""Domain models for pm_staking — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.pm_common.cents import BPS_DENOMINATOR
from src.pm_common.enums import Side


@dataclass
class Position:
    market_id: int
    user_id: str
    yes_shares: int = 0
    no_shares: int = 0
    claimed: bool = False
    payout: int | None = None
    claimed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def shares(self, side: Side) -> int:
        return self.yes_shares if side is Side.YES else self.no_shares


@dataclass
class StakeEvent:
    """Append-only stake log row; id is assigned by the database."""

    market_id: int
    user_id: str
    side: Side
    amount: int
    shares: int
    created_at: datetime
    transfer_ref: str | None = None
    id: int | None = None


@dataclass(frozen=True)
class StakeResult:
    shares: int
    new_yes_pool: int
    new_no_pool: int
    receipt_id: str


@dataclass(frozen=True)
class Odds:
    """Implied odds in basis points; yes_bps + no_bps == 10000 always."""

    yes_bps: int
    no_bps: int

    @property
    def yes_pct(self) -> float:
        return self.yes_bps / 100

    @property
    def no_pct(self) -> float:
        return self.no_bps / 100


def compute_odds(yes_pool: int, no_pool: int) -> Odds:
    """yes = yes_pool / total, floored to a basis point; 50/50 on empty pools."""
    total = yes_pool + no_pool
    if total == 0:
        half = BPS_DENOMINATOR // 2
        return Odds(yes_bps=half, no_bps=BPS_DENOMINATOR - half)
    yes_bps = yes_pool * BPS_DENOMINATOR // total
    return Odds(yes_bps=yes_bps, no_bps=BPS_DENOMINATOR - yes_bps)


@dataclass
class MarketStats:
    market_id: int
    total_volume: int
    yes_volume: int
    no_volume: int
    stake_count: int
    participants: int
    yes_participants: int
    no_participants: int
