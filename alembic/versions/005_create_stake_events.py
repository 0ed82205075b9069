"""005: create stake_events table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE stake_events (
            id              BIGSERIAL       PRIMARY KEY,
            market_id       BIGINT          NOT NULL REFERENCES markets(id),
            user_id         VARCHAR(64)     NOT NULL,
            side            VARCHAR(3)      NOT NULL,
            amount          BIGINT          NOT NULL,
            shares          BIGINT          NOT NULL,
            transfer_ref    VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_stake_events_side     CHECK (side IN ('YES', 'NO')),
            CONSTRAINT ck_stake_events_amount   CHECK (amount > 0 AND shares > 0)
        );
    """)
    op.execute("CREATE INDEX idx_stake_events_market ON stake_events (market_id, created_at);")
    op.execute("CREATE INDEX idx_stake_events_user ON stake_events (user_id, created_at DESC);")
    op.execute("COMMENT ON TABLE stake_events IS 'Append-only stake log, never updated or deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS stake_events CASCADE;")
