"""007: seed system accounts

Revision ID: 007
Revises: 006
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Stakes are held here until claimed
    op.execute("""
        INSERT INTO accounts (user_id, available_balance, version)
        VALUES ('MARKET_CUSTODY', 0, 0);
    """)
    op.execute("""
        INSERT INTO accounts (user_id, available_balance, version)
        VALUES ('PLATFORM_FEE', 0, 0);
    """)


def downgrade() -> None:
    op.execute("DELETE FROM accounts WHERE user_id IN ('MARKET_CUSTODY', 'PLATFORM_FEE');")
