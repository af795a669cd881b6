"""005: create orders and order_items tables

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
        CREATE TABLE orders (
            id                  VARCHAR(64)     PRIMARY KEY,
            user_id             VARCHAR(64)     NOT NULL,
            total_amount        BIGINT          NOT NULL,
            payment_method      VARCHAR(20)     NOT NULL,
            shipping_address    VARCHAR(500)    NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'pending',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_total_gte_0    CHECK (total_amount >= 0),
            CONSTRAINT ck_orders_payment_method CHECK (payment_method IN ('balance', 'card')),
            CONSTRAINT ck_orders_status         CHECK (
                status IN ('pending', 'paid', 'shipped', 'delivered',
                           'cancelled', 'released', 'refunded')
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_user ON orders (user_id, created_at DESC);")
    op.execute("CREATE INDEX idx_orders_status ON orders (status);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    # Line snapshots: no FK to products, listings may be deleted after sale
    op.execute("""
        CREATE TABLE order_items (
            order_id        VARCHAR(64)     NOT NULL
                            REFERENCES orders (id) ON DELETE CASCADE,
            line_no         INT             NOT NULL,
            product_id      VARCHAR(64)     NOT NULL,
            seller_id       VARCHAR(64)     NOT NULL,
            name            VARCHAR(200)    NOT NULL,
            price           BIGINT          NOT NULL,
            quantity        INT             NOT NULL,
            CONSTRAINT pk_order_items PRIMARY KEY (order_id, line_no),
            CONSTRAINT ck_order_items_price_gte_0 CHECK (price >= 0),
            CONSTRAINT ck_order_items_quantity    CHECK (quantity > 0)
        );
    """)
    op.execute("CREATE INDEX idx_order_items_seller ON order_items (seller_id);")
    op.execute("CREATE INDEX idx_order_items_product ON order_items (product_id);")
    op.execute("COMMENT ON TABLE orders IS 'Orders; total_amount in cents, fixed at placement';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
