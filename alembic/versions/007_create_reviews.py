"""007: create reviews table

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
    op.execute("""
        CREATE TABLE reviews (
            id              VARCHAR(64)     PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            product_id      VARCHAR(64)     NOT NULL
                            REFERENCES products (id) ON DELETE CASCADE,
            rating          SMALLINT        NOT NULL,
            comment         VARCHAR(2000)   NOT NULL DEFAULT '',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_reviews_user_product UNIQUE (user_id, product_id),
            CONSTRAINT ck_reviews_rating       CHECK (rating BETWEEN 1 AND 5)
        );
    """)
    op.execute("CREATE INDEX idx_reviews_product ON reviews (product_id, created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_reviews_updated_at
            BEFORE UPDATE ON reviews
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS reviews CASCADE;")
