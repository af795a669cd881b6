"""Cart repository Protocol. One row per (user, product)."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_cart.domain.models import CartItem


class CartRepositoryProtocol(Protocol):
    async def get_items(self, db: AsyncSession, user_id: str) -> list[CartItem]: ...

    async def get_items_for_update(
        self, db: AsyncSession, user_id: str
    ) -> list[CartItem]: ...

    async def add_item(
        self, db: AsyncSession, user_id: str, product_id: str, quantity: int
    ) -> CartItem: ...

    async def set_quantity(
        self, db: AsyncSession, user_id: str, product_id: str, quantity: int
    ) -> CartItem | None: ...

    async def remove_item(self, db: AsyncSession, user_id: str, product_id: str) -> bool: ...

    async def clear(self, db: AsyncSession, user_id: str) -> int: ...
