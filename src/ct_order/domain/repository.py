"""Order repository Protocol.

The settlement engine uses save / get_for_update / set_status inside its own
transaction; the remaining reads back the order listing endpoints.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_order.domain.models import Order, ProductSales, SellerSummary


class OrderRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, order: Order) -> None: ...

    async def get_by_id(self, db: AsyncSession, order_id: str) -> Order | None: ...

    async def get_for_update(self, db: AsyncSession, order_id: str) -> Order | None: ...

    async def set_status(self, db: AsyncSession, order_id: str, status: str) -> None: ...

    async def update_shipping_address(
        self, db: AsyncSession, order_id: str, shipping_address: str
    ) -> Order | None: ...

    async def list_by_user(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[Order]: ...

    async def list_all(self, db: AsyncSession, limit: int) -> list[Order]: ...

    async def list_by_seller(
        self, db: AsyncSession, seller_id: str, limit: int
    ) -> list[Order]: ...

    async def sales_by_product(
        self, db: AsyncSession, seller_id: str
    ) -> list[ProductSales]: ...

    async def seller_summary(self, db: AsyncSession, seller_id: str) -> SellerSummary: ...
