"""Unit tests for the parimutuel payout formula."""

from src.pm_settlement.domain.payout import (
    ZERO_PAYOUT,
    calculate_claim_payout,
    calculate_payout,
)


class TestCalculatePayout:
    def test_basic_win(self) -> None:
        # YES 100 vs NO 50, 2% fee on the 50 of winnings
        p = calculate_payout(user_shares=100, winning_pool=100, losing_pool=50, fee_bps=200)
        assert p.principal == 100
        assert p.winnings == 50
        assert p.gross == 150
        assert p.fee == 1
        assert p.net == 149

    def test_fee_never_on_principal(self) -> None:
        p = calculate_payout(user_shares=100, winning_pool=100, losing_pool=0, fee_bps=200)
        assert p.net == 100
        assert p.fee == 0

    def test_floor_pro_rata(self) -> None:
        # 1/3 of 100 floors to 33
        p = calculate_payout(user_shares=1, winning_pool=3, losing_pool=100, fee_bps=0)
        assert p.winnings == 33

    def test_zero_shares(self) -> None:
        assert calculate_payout(0, 100, 50, 200) is ZERO_PAYOUT


class TestCalculateClaimPayout:
    def test_matches_preview_before_last_claimer(self) -> None:
        p = calculate_claim_payout(
            user_shares=1, winning_pool=3, losing_pool=100, fee_bps=0,
            claimed_shares=0, claimed_winnings=0,
        )
        assert p.winnings == 33

    def test_last_claimer_takes_remainder(self) -> None:
        # two earlier claimers took 33 each
        p = calculate_claim_payout(
            user_shares=1, winning_pool=3, losing_pool=100, fee_bps=0,
            claimed_shares=2, claimed_winnings=66,
        )
        assert p.winnings == 34
        assert p.net == 35

    def test_no_fee_distribution_is_exact(self) -> None:
        shares = [1, 1, 1]
        winning_pool, losing_pool = sum(shares), 100
        claimed_shares = claimed_winnings = 0
        total_net = 0
        for s in shares:
            p = calculate_claim_payout(
                s, winning_pool, losing_pool, 0, claimed_shares, claimed_winnings
            )
            claimed_shares += s
            claimed_winnings += p.winnings
            total_net += p.net
        assert total_net == winning_pool + losing_pool

    def test_all_one_side(self) -> None:
        p = calculate_claim_payout(
            user_shares=40, winning_pool=100, losing_pool=0, fee_bps=200,
            claimed_shares=60, claimed_winnings=0,
        )
        assert p.net == 40
        assert p.fee == 0
