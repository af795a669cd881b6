"""004: create cart_items table

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
        CREATE TABLE cart_items (
            user_id         VARCHAR(64)     NOT NULL,
            product_id      VARCHAR(64)     NOT NULL
                            REFERENCES products (id) ON DELETE CASCADE,
            quantity        INT             NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT pk_cart_items PRIMARY KEY (user_id, product_id),
            CONSTRAINT ck_cart_items_quantity CHECK (quantity > 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_cart_items_updated_at
            BEFORE UPDATE ON cart_items
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS cart_items CASCADE;")
