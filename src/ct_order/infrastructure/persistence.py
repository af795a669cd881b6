"""OrderRepository — raw SQL persistence over orders + order_items."""

from typing import Any

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_order.domain.models import Order, OrderItem, ProductSales, SellerSummary

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    o.id, o.user_id, o.total_amount, o.payment_method, o.shipping_address,
    o.status, o.created_at, o.updated_at
"""

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, user_id, total_amount, payment_method, shipping_address, status)
    VALUES (:id, :user_id, :total_amount, :payment_method, :shipping_address, :status)
""")

_INSERT_ITEM_SQL = text("""
    INSERT INTO order_items (order_id, line_no, product_id, seller_id, name, price, quantity)
    VALUES (:order_id, :line_no, :product_id, :seller_id, :name, :price, :quantity)
""")

_GET_ORDER_SQL = text(f"SELECT {_SELECT_COLUMNS} FROM orders o WHERE o.id = :id")

_GET_ORDER_FOR_UPDATE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS} FROM orders o WHERE o.id = :id FOR UPDATE
""")

_GET_ITEMS_SQL = text("""
    SELECT order_id, product_id, seller_id, name, price, quantity
    FROM order_items
    WHERE order_id IN :order_ids
    ORDER BY order_id, line_no
""").bindparams(bindparam("order_ids", expanding=True))

_SET_STATUS_SQL = text("""
    UPDATE orders SET status = :status, updated_at = NOW() WHERE id = :id
""")

_UPDATE_ADDRESS_SQL = text(f"""
    UPDATE orders o SET shipping_address = :shipping_address, updated_at = NOW()
    WHERE o.id = :id
    RETURNING {_SELECT_COLUMNS}
""")

_LIST_BY_USER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS} FROM orders o
    WHERE o.user_id = :user_id
    ORDER BY o.created_at DESC, o.id DESC
    LIMIT :limit
""")

_LIST_ALL_SQL = text(f"""
    SELECT {_SELECT_COLUMNS} FROM orders o
    ORDER BY o.created_at DESC, o.id DESC
    LIMIT :limit
""")

_LIST_BY_SELLER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS} FROM orders o
    WHERE EXISTS (
        SELECT 1 FROM order_items i WHERE i.order_id = o.id AND i.seller_id = :seller_id
    )
    ORDER BY o.created_at DESC, o.id DESC
    LIMIT :limit
""")

# Line snapshots are authoritative for names and prices, even for deleted products
_SALES_BY_PRODUCT_SQL = text("""
    SELECT product_id, MAX(name) AS name, SUM(quantity) AS units_sold
    FROM order_items
    WHERE seller_id = :seller_id
    GROUP BY product_id
    ORDER BY units_sold DESC, product_id
""")

_SELLER_SUMMARY_SQL = text("""
    SELECT COALESCE(SUM(quantity), 0)          AS total_units,
           COALESCE(SUM(price * quantity), 0)  AS total_revenue,
           COUNT(DISTINCT order_id)            AS order_count
    FROM order_items
    WHERE seller_id = :seller_id
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    return Order(
        id=row.id,
        user_id=str(row.user_id),
        total_amount=row.total_amount,
        payment_method=row.payment_method,
        shipping_address=row.shipping_address,
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_item(row: Any) -> OrderItem:
    return OrderItem(
        product_id=row.product_id,
        seller_id=str(row.seller_id),
        name=row.name,
        price=row.price,
        quantity=row.quantity,
    )


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def save(self, db: AsyncSession, order: Order) -> None:
        await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "user_id": order.user_id,
                "total_amount": order.total_amount,
                "payment_method": order.payment_method,
                "shipping_address": order.shipping_address,
                "status": order.status,
            },
        )
        for line_no, item in enumerate(order.items, start=1):
            await db.execute(
                _INSERT_ITEM_SQL,
                {
                    "order_id": order.id,
                    "line_no": line_no,
                    "product_id": item.product_id,
                    "seller_id": item.seller_id,
                    "name": item.name,
                    "price": item.price,
                    "quantity": item.quantity,
                },
            )

    async def get_by_id(self, db: AsyncSession, order_id: str) -> Order | None:
        row = (await db.execute(_GET_ORDER_SQL, {"id": order_id})).fetchone()
        if row is None:
            return None
        return (await self._attach_items(db, [_row_to_order(row)]))[0]

    async def get_for_update(self, db: AsyncSession, order_id: str) -> Order | None:
        """Lock the order row for the rest of the transaction."""
        row = (await db.execute(_GET_ORDER_FOR_UPDATE_SQL, {"id": order_id})).fetchone()
        if row is None:
            return None
        return (await self._attach_items(db, [_row_to_order(row)]))[0]

    async def set_status(self, db: AsyncSession, order_id: str, status: str) -> None:
        await db.execute(_SET_STATUS_SQL, {"id": order_id, "status": status})

    async def update_shipping_address(
        self, db: AsyncSession, order_id: str, shipping_address: str
    ) -> Order | None:
        result = await db.execute(
            _UPDATE_ADDRESS_SQL, {"id": order_id, "shipping_address": shipping_address}
        )
        row = result.fetchone()
        if row is None:
            return None
        return (await self._attach_items(db, [_row_to_order(row)]))[0]

    async def list_by_user(self, db: AsyncSession, user_id: str, limit: int) -> list[Order]:
        result = await db.execute(_LIST_BY_USER_SQL, {"user_id": user_id, "limit": limit})
        return await self._attach_items(db, [_row_to_order(r) for r in result.fetchall()])

    async def list_all(self, db: AsyncSession, limit: int) -> list[Order]:
        result = await db.execute(_LIST_ALL_SQL, {"limit": limit})
        return await self._attach_items(db, [_row_to_order(r) for r in result.fetchall()])

    async def list_by_seller(
        self, db: AsyncSession, seller_id: str, limit: int
    ) -> list[Order]:
        result = await db.execute(_LIST_BY_SELLER_SQL, {"seller_id": seller_id, "limit": limit})
        return await self._attach_items(db, [_row_to_order(r) for r in result.fetchall()])

    async def sales_by_product(self, db: AsyncSession, seller_id: str) -> list[ProductSales]:
        result = await db.execute(_SALES_BY_PRODUCT_SQL, {"seller_id": seller_id})
        return [
            ProductSales(product_id=r.product_id, name=r.name, units_sold=int(r.units_sold))
            for r in result.fetchall()
        ]

    async def seller_summary(self, db: AsyncSession, seller_id: str) -> SellerSummary:
        row = (await db.execute(_SELLER_SUMMARY_SQL, {"seller_id": seller_id})).fetchone()
        return SellerSummary(
            total_units=int(row.total_units),
            total_revenue=int(row.total_revenue),
            order_count=int(row.order_count),
        )

    async def _attach_items(self, db: AsyncSession, orders: list[Order]) -> list[Order]:
        """Load line items for all orders in one query."""
        if not orders:
            return orders
        result = await db.execute(_GET_ITEMS_SQL, {"order_ids": [o.id for o in orders]})
        by_order: dict[str, list[OrderItem]] = {o.id: [] for o in orders}
        for row in result.fetchall():
            by_order[row.order_id].append(_row_to_item(row))
        for order in orders:
            order.items = by_order[order.id]
        return orders
