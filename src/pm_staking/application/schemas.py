"""Pydantic schemas for pm_staking API requests and responses."""

from pydantic import BaseModel, Field

from src.pm_common.cents import cents_to_display
from src.pm_common.enums import Side
from src.pm_settlement.domain.payout import PayoutBreakdown
from src.pm_staking.domain.models import MarketStats, Odds, Position, StakeResult


class StakeRequest(BaseModel):
    side: Side
    amount: int = Field(..., gt=0, description="Stake in minor units (cents)")


class StakeResponse(BaseModel):
    market_id: int
    side: Side
    shares: int
    new_yes_pool: int
    new_no_pool: int
    receipt_id: str

    @classmethod
    def from_result(cls, market_id: int, side: Side, r: StakeResult) -> "StakeResponse":
        return cls(
            market_id=market_id,
            side=side,
            shares=r.shares,
            new_yes_pool=r.new_yes_pool,
            new_no_pool=r.new_no_pool,
            receipt_id=r.receipt_id,
        )


class OddsResponse(BaseModel):
    market_id: int
    yes_odds: float
    no_odds: float
    yes_bps: int
    no_bps: int

    @classmethod
    def from_domain(cls, market_id: int, odds: Odds) -> "OddsResponse":
        return cls(
            market_id=market_id,
            yes_odds=odds.yes_pct,
            no_odds=odds.no_pct,
            yes_bps=odds.yes_bps,
            no_bps=odds.no_bps,
        )


class PayoutPreviewResponse(BaseModel):
    market_id: int
    side: Side
    amount: int
    principal: int
    winnings: int
    platform_fee: int
    projected_payout: int
    projected_payout_display: str

    @classmethod
    def from_breakdown(
        cls, market_id: int, side: Side, amount: int, p: PayoutBreakdown
    ) -> "PayoutPreviewResponse":
        return cls(
            market_id=market_id,
            side=side,
            amount=amount,
            principal=p.principal,
            winnings=p.winnings,
            platform_fee=p.fee,
            projected_payout=p.net,
            projected_payout_display=cents_to_display(p.net),
        )


class PositionResponse(BaseModel):
    market_id: int
    user_id: str
    yes_shares: int
    no_shares: int
    claimed: bool
    payout: int | None

    @classmethod
    def from_domain(cls, p: Position) -> "PositionResponse":
        return cls(
            market_id=p.market_id,
            user_id=p.user_id,
            yes_shares=p.yes_shares,
            no_shares=p.no_shares,
            claimed=p.claimed,
            payout=p.payout,
        )


class MarketStatsResponse(BaseModel):
    market_id: int
    total_volume: int
    total_volume_display: str
    yes_volume: int
    no_volume: int
    stake_count: int
    participants: int
    yes_participants: int
    no_participants: int

    @classmethod
    def from_domain(cls, s: MarketStats) -> "MarketStatsResponse":
        return cls(
            market_id=s.market_id,
            total_volume=s.total_volume,
            total_volume_display=cents_to_display(s.total_volume),
            yes_volume=s.yes_volume,
            no_volume=s.no_volume,
            stake_count=s.stake_count,
            participants=s.participants,
            yes_participants=s.yes_participants,
            no_participants=s.no_participants,
        )
