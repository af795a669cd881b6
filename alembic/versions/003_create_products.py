"""003: create products table

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
        CREATE TABLE products (
            id              VARCHAR(64)     PRIMARY KEY,
            seller_id       VARCHAR(64)     NOT NULL,
            name            VARCHAR(200)    NOT NULL,
            description     TEXT,
            price           BIGINT          NOT NULL,
            category        VARCHAR(100),
            stock           INT             NOT NULL DEFAULT 0,
            image           VARCHAR(500)    NOT NULL DEFAULT '',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price_gte_0 CHECK (price >= 0),
            CONSTRAINT ck_products_stock_gte_0 CHECK (stock >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_products_seller ON products (seller_id);")
    op.execute("CREATE INDEX idx_products_category ON products (category);")
    op.execute("CREATE INDEX idx_products_created ON products (created_at DESC);")
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE products IS 'Product listings, price in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
