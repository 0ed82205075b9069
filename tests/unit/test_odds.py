"""Unit tests for implied odds."""

import pytest

from src.pm_staking.domain.models import compute_odds


def test_empty_pools_are_even() -> None:
    odds = compute_odds(0, 0)
    assert (odds.yes_bps, odds.no_bps) == (5000, 5000)
    assert odds.yes_pct == 50.0


def test_two_to_one() -> None:
    odds = compute_odds(100, 50)
    assert odds.yes_bps == 6666
    assert odds.no_bps == 3334


def test_one_sided() -> None:
    odds = compute_odds(0, 10)
    assert odds.yes_pct == 0.0
    assert odds.no_pct == 100.0


@pytest.mark.parametrize(
    ("yes", "no"), [(0, 0), (1, 0), (1, 2), (7, 13), (333, 667), (10**12, 3)]
)
def test_always_sums_to_100(yes: int, no: int) -> None:
    odds = compute_odds(yes, no)
    assert odds.yes_bps + odds.no_bps == 10000
    assert odds.yes_pct + odds.no_pct == pytest.approx(100.0)
