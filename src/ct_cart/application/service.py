"""CartService — the buyer's working cart. Every mutation commits on its own."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_cart.application.schemas import CartLineResponse, CartResponse
from src.ct_cart.domain.repository import CartRepositoryProtocol
from src.ct_cart.infrastructure.persistence import CartRepository
from src.ct_catalog.domain.repository import CatalogRepositoryProtocol
from src.ct_catalog.infrastructure.persistence import CatalogRepository
from src.ct_common.errors import CartItemNotFoundError, ProductNotFoundError


class CartService:
    def __init__(
        self,
        repo: CartRepositoryProtocol | None = None,
        catalog: CatalogRepositoryProtocol | None = None,
    ) -> None:
        self._repo: CartRepositoryProtocol = repo or CartRepository()
        self._catalog: CatalogRepositoryProtocol = catalog or CatalogRepository()

    async def get_cart(self, db: AsyncSession, user_id: str) -> CartResponse:
        items = await self._repo.get_items(db, user_id)
        return CartResponse.from_items(items)

    async def add_item(
        self, db: AsyncSession, user_id: str, product_id: str, quantity: int
    ) -> CartLineResponse:
        product = await self._catalog.get_product(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        try:
            item = await self._repo.add_item(db, user_id, product_id, quantity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        item.product_name = product.name
        item.price = product.price
        return CartLineResponse.from_domain(item)

    async def update_quantity(
        self, db: AsyncSession, user_id: str, product_id: str, quantity: int
    ) -> CartLineResponse:
        try:
            item = await self._repo.set_quantity(db, user_id, product_id, quantity)
            if item is None:
                raise CartItemNotFoundError(product_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        product = await self._catalog.get_product(db, product_id)
        if product is not None:
            item.product_name = product.name
            item.price = product.price
        return CartLineResponse.from_domain(item)

    async def remove_item(self, db: AsyncSession, user_id: str, product_id: str) -> None:
        try:
            if not await self._repo.remove_item(db, user_id, product_id):
                raise CartItemNotFoundError(product_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
