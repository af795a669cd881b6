"""008: create disputes table

Revision ID: 008
Revises: 007
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "008"
down_revision: Union[str, None] = "007"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE disputes (
            id              VARCHAR(64)     PRIMARY KEY,
            order_id        VARCHAR(64)     NOT NULL REFERENCES orders (id),
            buyer_id        VARCHAR(64)     NOT NULL,
            seller_id       VARCHAR(64)     NOT NULL,
            message         VARCHAR(5000)   NOT NULL,
            resolved        BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("CREATE INDEX idx_disputes_buyer ON disputes (buyer_id, created_at DESC);")
    op.execute("CREATE INDEX idx_disputes_seller ON disputes (seller_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_disputes_updated_at
            BEFORE UPDATE ON disputes
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS disputes CASCADE;")
