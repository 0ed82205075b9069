"""Parimutuel payout — one formula for previews and real claims.

A winner gets their principal back plus a pro-rata share of the losing pool:

    winnings = floor(user_shares * losing_pool / winning_pool)
    fee      = ceil(winnings * fee_bps / 10000)      # winnings only, never principal
    net      = user_shares + winnings - fee

Flooring leaves at most (winners - 1) units of dust in the losing pool. The
claimant holding the last unclaimed winning shares receives that remainder,
so the whole pool is distributed; the remainder only ever raises a payout.
"""

from dataclasses import dataclass

from src.pm_common.cents import calculate_fee, pro_rata


@dataclass(frozen=True)
class PayoutBreakdown:
    principal: int
    winnings: int
    fee: int

    @property
    def gross(self) -> int:
        return self.principal + self.winnings

    @property
    def net(self) -> int:
        return self.gross - self.fee


ZERO_PAYOUT = PayoutBreakdown(principal=0, winnings=0, fee=0)


def calculate_payout(
    user_shares: int, winning_pool: int, losing_pool: int, fee_bps: int
) -> PayoutBreakdown:
    """Payout for `user_shares` of a winning pool, without the dust remainder."""
    if user_shares <= 0:
        return ZERO_PAYOUT
    if winning_pool <= 0 or losing_pool <= 0:
        return PayoutBreakdown(principal=user_shares, winnings=0, fee=0)
    winnings = pro_rata(losing_pool, user_shares, winning_pool)
    return PayoutBreakdown(
        principal=user_shares,
        winnings=winnings,
        fee=calculate_fee(winnings, fee_bps),
    )


def calculate_claim_payout(
    user_shares: int,
    winning_pool: int,
    losing_pool: int,
    fee_bps: int,
    claimed_shares: int,
    claimed_winnings: int,
) -> PayoutBreakdown:
    """Payout for an actual claim, given what earlier claims already took."""
    if user_shares <= 0:
        return ZERO_PAYOUT
    if claimed_shares + user_shares >= winning_pool and losing_pool > 0:
        winnings = losing_pool - claimed_winnings
        return PayoutBreakdown(
            principal=user_shares,
            winnings=winnings,
            fee=calculate_fee(winnings, fee_bps),
        )
    return calculate_payout(user_shares, winning_pool, losing_pool, fee_bps)
