"""Outcome rule for threshold markets.

YES wins when the oracle price at resolution is at or above the threshold.
Ties resolve YES. Pure and deterministic: the same inputs always give the
same outcome.
"""


def determine_outcome(oracle_price: int, threshold_price: int) -> bool:
    return oracle_price >= threshold_price
