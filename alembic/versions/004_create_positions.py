"""004: create positions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE positions (
            market_id       BIGINT          NOT NULL REFERENCES markets(id),
            user_id         VARCHAR(64)     NOT NULL,
            yes_shares      BIGINT          NOT NULL DEFAULT 0,
            no_shares       BIGINT          NOT NULL DEFAULT 0,
            claimed         BOOLEAN         NOT NULL DEFAULT FALSE,
            payout          BIGINT,
            claimed_at      TIMESTAMPTZ,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (market_id, user_id),
            CONSTRAINT ck_positions_shares_gte_0 CHECK (yes_shares >= 0 AND no_shares >= 0),
            CONSTRAINT ck_positions_claim CHECK (
                (claimed = FALSE AND payout IS NULL AND claimed_at IS NULL)
                OR (claimed = TRUE AND payout IS NOT NULL AND claimed_at IS NOT NULL)
            )
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_positions_updated_at
            BEFORE UPDATE ON positions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("CREATE INDEX idx_positions_user ON positions (user_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS positions CASCADE;")
