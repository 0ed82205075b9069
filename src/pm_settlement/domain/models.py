"""Domain models for pm_settlement."""

from dataclasses import dataclass
from datetime import datetime

from src.pm_common.enums import Side
from src.pm_settlement.domain.payout import PayoutBreakdown


@dataclass(frozen=True)
class ClaimResult:
    market_id: int
    user_id: str
    side: Side
    shares: int
    payout: PayoutBreakdown
    receipt_id: str         # transfer receipt for the user's payout
    claimed_at: datetime
