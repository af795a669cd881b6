"""Catalog repository Protocol.

Settlement needs only get/lock/decrement/increment; the rest serves the
product listing endpoints.
"""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_catalog.domain.models import Product, ProductFilter


class CatalogRepositoryProtocol(Protocol):
    async def get_product(self, db: AsyncSession, product_id: str) -> Product | None: ...

    async def lock_products(
        self, db: AsyncSession, product_ids: list[str]
    ) -> dict[str, Product]: ...

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> Product: ...

    async def increment_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> Product | None: ...

    async def create_product(self, db: AsyncSession, product: Product) -> Product: ...

    async def update_product(
        self, db: AsyncSession, product_id: str, changes: dict[str, Any]
    ) -> Product | None: ...

    async def delete_product(self, db: AsyncSession, product_id: str) -> bool: ...

    async def list_products(
        self, db: AsyncSession, filters: ProductFilter, limit: int
    ) -> list[Product]: ...

    async def list_low_stock(
        self, db: AsyncSession, threshold: int
    ) -> list[Product]: ...

    async def list_by_seller(self, db: AsyncSession, seller_id: str) -> list[Product]: ...
