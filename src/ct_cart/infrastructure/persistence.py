"""CartRepository — raw SQL over the cart_items table."""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_cart.domain.models import CartItem

_GET_ITEMS_SQL = text("""
    SELECT c.user_id, c.product_id, c.quantity, c.created_at,
           p.name AS product_name, p.price
    FROM cart_items c
    LEFT JOIN products p ON p.id = c.product_id
    WHERE c.user_id = :user_id
    ORDER BY c.created_at, c.product_id
""")

# Adding an existing product accumulates its quantity
_UPSERT_SQL = text("""
    INSERT INTO cart_items (user_id, product_id, quantity)
    VALUES (:user_id, :product_id, :quantity)
    ON CONFLICT (user_id, product_id)
    DO UPDATE SET quantity = cart_items.quantity + EXCLUDED.quantity, updated_at = NOW()
    RETURNING user_id, product_id, quantity, created_at
""")

_SET_QUANTITY_SQL = text("""
    UPDATE cart_items
    SET quantity = :quantity, updated_at = NOW()
    WHERE user_id = :user_id AND product_id = :product_id
    RETURNING user_id, product_id, quantity, created_at
""")

_REMOVE_SQL = text("""
    DELETE FROM cart_items
    WHERE user_id = :user_id AND product_id = :product_id
    RETURNING product_id
""")

# Placement locks the buyer's cart rows before any product or account row
_LOCK_ITEMS_SQL = text("""
    SELECT user_id, product_id, quantity, created_at
    FROM cart_items
    WHERE user_id = :user_id
    ORDER BY product_id
    FOR UPDATE
""")

_CLEAR_SQL = text("DELETE FROM cart_items WHERE user_id = :user_id")


def _row_to_item(row: Any) -> CartItem:
    return CartItem(
        user_id=str(row.user_id),
        product_id=row.product_id,
        quantity=row.quantity,
        product_name=getattr(row, "product_name", None),
        price=getattr(row, "price", None),
        created_at=row.created_at,
    )


class CartRepository:
    """Concrete implementation of CartRepositoryProtocol using raw SQL."""

    async def get_items(self, db: AsyncSession, user_id: str) -> list[CartItem]:
        result = await db.execute(_GET_ITEMS_SQL, {"user_id": user_id})
        return [_row_to_item(row) for row in result.fetchall()]

    async def get_items_for_update(self, db: AsyncSession, user_id: str) -> list[CartItem]:
        result = await db.execute(_LOCK_ITEMS_SQL, {"user_id": user_id})
        return [_row_to_item(row) for row in result.fetchall()]

    async def add_item(
        self, db: AsyncSession, user_id: str, product_id: str, quantity: int
    ) -> CartItem:
        result = await db.execute(
            _UPSERT_SQL,
            {"user_id": user_id, "product_id": product_id, "quantity": quantity},
        )
        return _row_to_item(result.fetchone())

    async def set_quantity(
        self, db: AsyncSession, user_id: str, product_id: str, quantity: int
    ) -> CartItem | None:
        result = await db.execute(
            _SET_QUANTITY_SQL,
            {"user_id": user_id, "product_id": product_id, "quantity": quantity},
        )
        row = result.fetchone()
        return _row_to_item(row) if row else None

    async def remove_item(self, db: AsyncSession, user_id: str, product_id: str) -> bool:
        result = await db.execute(_REMOVE_SQL, {"user_id": user_id, "product_id": product_id})
        return result.fetchone() is not None

    async def clear(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(_CLEAR_SQL, {"user_id": user_id})
        return result.rowcount
