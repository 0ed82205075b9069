"""AdminService — ledger-wide invariant verification."""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_admin.domain.invariants import check_market_invariants
from src.pm_market.infrastructure.persistence import row_to_market
from src.pm_transfer.domain.models import MARKET_CUSTODY_USER_ID

logger = logging.getLogger(__name__)

_MARKETS_WITH_STAKES_SQL = text("""
    SELECT m.*,
           COALESCE(s.staked_yes, 0) AS staked_yes,
           COALESCE(s.staked_no, 0) AS staked_no
    FROM markets m
    LEFT JOIN (
        SELECT market_id,
               SUM(amount) FILTER (WHERE side = 'YES') AS staked_yes,
               SUM(amount) FILTER (WHERE side = 'NO') AS staked_no
        FROM stake_events
        GROUP BY market_id
    ) s ON s.market_id = m.id
    ORDER BY m.id
""")

_CUSTODY_BALANCE_SQL = text(
    "SELECT COALESCE(available_balance, 0) FROM accounts WHERE user_id = :user_id"
)


class AdminService:
    async def verify_all_invariants(self, db: AsyncSession) -> dict[str, object]:
        """Check every market's pools against its stake log, then custody against open pools."""
        violations: list[str] = []
        outstanding = 0
        rows = (await db.execute(_MARKETS_WITH_STAKES_SQL)).fetchall()
        for row in rows:
            market = row_to_market(row)
            violations.extend(
                check_market_invariants(market, int(row.staked_yes), int(row.staked_no))
            )
            outstanding += market.total_pool - market.claimed_shares - market.claimed_winnings

        custody = (
            await db.execute(_CUSTODY_BALANCE_SQL, {"user_id": MARKET_CUSTODY_USER_ID})
        ).scalar_one_or_none() or 0
        if custody != outstanding:
            violations.append(
                f"custody balance {custody} != outstanding pool funds {outstanding}"
            )

        for v in violations:
            logger.error("Invariant violated: %s", v)
        return {"ok": not violations, "markets_checked": len(rows), "violations": violations}
