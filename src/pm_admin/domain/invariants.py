"""Pool-conservation checks for a single market.

Every unit staked is either still in a pool or has been paid out:
  * pools equal the sum of the stake-event log per side
  * nothing is claimed before resolution
  * claims never exceed the winning pool (principal) or the losing pool (winnings)
  * once every winning share is claimed the losing pool is fully distributed
"""

from src.pm_market.domain.models import Market


def check_market_invariants(market: Market, staked_yes: int, staked_no: int) -> list[str]:
    """Return human-readable violations; empty when the market is consistent."""
    violations: list[str] = []
    mid = market.id

    if market.yes_pool != staked_yes:
        violations.append(f"market {mid}: yes_pool={market.yes_pool} != staked YES {staked_yes}")
    if market.no_pool != staked_no:
        violations.append(f"market {mid}: no_pool={market.no_pool} != staked NO {staked_no}")

    side = market.winning_side
    if side is None:
        if market.claimed_shares or market.claimed_winnings or market.fees_collected:
            violations.append(f"market {mid}: claims recorded before resolution")
        return violations

    winning_pool = market.pool(side)
    losing_pool = market.pool(side.opposite)
    if market.claimed_shares > winning_pool:
        violations.append(
            f"market {mid}: claimed_shares={market.claimed_shares} > winning pool {winning_pool}"
        )
    if market.claimed_winnings > losing_pool:
        violations.append(
            f"market {mid}: claimed_winnings={market.claimed_winnings} > losing pool {losing_pool}"
        )
    if market.fees_collected > market.claimed_winnings:
        violations.append(
            f"market {mid}: fees_collected={market.fees_collected} exceed winnings paid"
        )
    if (
        winning_pool > 0
        and market.claimed_shares == winning_pool
        and market.claimed_winnings != losing_pool
    ):
        violations.append(
            f"market {mid}: all winners paid but {losing_pool - market.claimed_winnings} "
            "of the losing pool undistributed"
        )
    return violations
