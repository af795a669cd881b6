"""OrderQueryService — order reads and the one buyer-side edit.

Status changes and anything that moves money live in ct_settlement.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.enums import OrderStatus, UserRole
from src.ct_common.errors import (
    ForbiddenError,
    MissingShippingAddressError,
    OrderNotEditableError,
    OrderNotFoundError,
)
from src.ct_order.application.schemas import (
    OrderListResponse,
    OrderResponse,
    ProductSalesItem,
    SellerSummaryResponse,
)
from src.ct_order.domain.models import Order
from src.ct_order.domain.repository import OrderRepositoryProtocol
from src.ct_order.infrastructure.persistence import OrderRepository


def can_view(order: Order, actor_id: str, actor_role: str) -> bool:
    """Admins see everything, buyers their own orders, sellers orders with their items."""
    if actor_role == UserRole.ADMIN.value:
        return True
    if actor_role == UserRole.SELLER.value:
        return order.involves_seller(actor_id)
    return order.user_id == actor_id


class OrderQueryService:
    def __init__(self, repo: OrderRepositoryProtocol | None = None) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()

    async def get_order(
        self, db: AsyncSession, order_id: str, actor_id: str, actor_role: str
    ) -> OrderResponse:
        order = await self._repo.get_by_id(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        if not can_view(order, actor_id, actor_role):
            raise ForbiddenError("Unauthorized access to this order")
        return OrderResponse.from_domain(order)

    async def list_user_orders(
        self, db: AsyncSession, user_id: str, actor_id: str, actor_role: str, limit: int
    ) -> OrderListResponse:
        if actor_role != UserRole.ADMIN.value and user_id != actor_id:
            raise ForbiddenError("Unauthorized access to orders")
        return OrderListResponse.from_orders(await self._repo.list_by_user(db, user_id, limit))

    async def list_all(self, db: AsyncSession, limit: int) -> OrderListResponse:
        return OrderListResponse.from_orders(await self._repo.list_all(db, limit))

    async def list_seller_orders(
        self, db: AsyncSession, seller_id: str, limit: int
    ) -> OrderListResponse:
        return OrderListResponse.from_orders(
            await self._repo.list_by_seller(db, seller_id, limit)
        )

    async def sales_by_product(
        self, db: AsyncSession, seller_id: str
    ) -> list[ProductSalesItem]:
        sales = await self._repo.sales_by_product(db, seller_id)
        return [ProductSalesItem.from_domain(s) for s in sales]

    async def seller_summary(self, db: AsyncSession, seller_id: str) -> SellerSummaryResponse:
        return SellerSummaryResponse.from_domain(await self._repo.seller_summary(db, seller_id))

    async def update_shipping_address(
        self, db: AsyncSession, order_id: str, shipping_address: str, actor_id: str
    ) -> OrderResponse:
        address = shipping_address.strip()
        if not address:
            raise MissingShippingAddressError()
        try:
            order = await self._repo.get_for_update(db, order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            if order.user_id != actor_id:
                raise ForbiddenError("You can only edit your own order")
            if order.status != OrderStatus.PENDING.value:
                raise OrderNotEditableError(order_id, order.status)
            updated = await self._repo.update_shipping_address(db, order_id, address)
            if updated is None:
                raise OrderNotFoundError(order_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return OrderResponse.from_domain(updated)
