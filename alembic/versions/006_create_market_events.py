"""006: create market_events table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE market_events (
            id              VARCHAR(64)     PRIMARY KEY,
            market_id       BIGINT          NOT NULL REFERENCES markets(id),
            event_type      VARCHAR(30)     NOT NULL,
            payload         JSONB           NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_market_events_type CHECK (
                event_type IN ('MARKET_CREATED', 'MARKET_RESOLVED', 'POSITION_CLAIMED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_market_events_market ON market_events (market_id, created_at);")
    op.execute("COMMENT ON TABLE market_events IS 'Append-only market audit log';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS market_events CASCADE;")
