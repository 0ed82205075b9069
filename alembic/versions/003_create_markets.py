"""003: create markets table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            id                  BIGSERIAL       PRIMARY KEY,
            commodity           VARCHAR(20)     NOT NULL,
            threshold_price     BIGINT          NOT NULL,
            expiry_time         TIMESTAMPTZ     NOT NULL,
            creator             VARCHAR(64)     NOT NULL,
            fee_bps             SMALLINT        NOT NULL,
            yes_pool            BIGINT          NOT NULL DEFAULT 0,
            no_pool             BIGINT          NOT NULL DEFAULT 0,
            resolved            BOOLEAN         NOT NULL DEFAULT FALSE,
            outcome             BOOLEAN,
            oracle_price        BIGINT,
            resolved_at         TIMESTAMPTZ,
            claimed_shares      BIGINT          NOT NULL DEFAULT 0,
            claimed_winnings    BIGINT          NOT NULL DEFAULT 0,
            fees_collected      BIGINT          NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_commodity CHECK (
                commodity IN (
                    'COFFEE', 'COCOA', 'TEA', 'GOLD', 'WHEAT', 'MAIZE',
                    'AVOCADO', 'MACADAMIA', 'COTTON', 'CASHEW', 'RUBBER'
                )
            ),
            CONSTRAINT ck_markets_threshold_gt_0    CHECK (threshold_price > 0),
            CONSTRAINT ck_markets_fee_bps           CHECK (fee_bps BETWEEN 0 AND 10000),
            CONSTRAINT ck_markets_pools_gte_0       CHECK (yes_pool >= 0 AND no_pool >= 0),
            CONSTRAINT ck_markets_resolution CHECK (
                (resolved = FALSE AND outcome IS NULL AND oracle_price IS NULL AND resolved_at IS NULL)
                OR (resolved = TRUE AND outcome IS NOT NULL AND oracle_price IS NOT NULL
                    AND resolved_at IS NOT NULL)
            ),
            CONSTRAINT ck_markets_claims_gte_0 CHECK (
                claimed_shares >= 0 AND claimed_winnings >= 0 AND fees_collected >= 0
            )
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE INDEX idx_markets_unresolved_expiry
        ON markets (expiry_time)
        WHERE resolved = FALSE;
    """)
    op.execute("CREATE INDEX idx_markets_commodity ON markets (commodity, id DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
