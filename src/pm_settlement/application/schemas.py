"""Pydantic schemas for pm_settlement API responses."""

from pydantic import BaseModel

from src.pm_common.cents import cents_to_display
from src.pm_common.enums import Side
from src.pm_settlement.domain.models import ClaimResult


class ClaimResponse(BaseModel):
    market_id: int
    side: Side
    shares: int
    principal: int
    winnings: int
    platform_fee: int
    payout: int
    payout_display: str
    receipt_id: str
    claimed_at: str

    @classmethod
    def from_domain(cls, r: ClaimResult) -> "ClaimResponse":
        return cls(
            market_id=r.market_id,
            side=r.side,
            shares=r.shares,
            principal=r.payout.principal,
            winnings=r.payout.winnings,
            platform_fee=r.payout.fee,
            payout=r.payout.net,
            payout_display=cents_to_display(r.payout.net),
            receipt_id=r.receipt_id,
            claimed_at=r.claimed_at.isoformat(),
        )
