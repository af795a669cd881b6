"""CatalogService — product listing management.

Writes commit their own transaction; stock movements caused by orders go
through the settlement engine instead.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_catalog.application.schemas import (
    ProductCreateRequest,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)
from src.ct_catalog.domain.models import Product, ProductFilter
from src.ct_catalog.domain.repository import CatalogRepositoryProtocol
from src.ct_catalog.infrastructure.persistence import CatalogRepository
from src.ct_common.enums import UserRole
from src.ct_common.errors import ForbiddenError, ProductNotFoundError
from src.ct_common.id_generator import generate_id

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, repo: CatalogRepositoryProtocol | None = None) -> None:
        self._repo: CatalogRepositoryProtocol = repo or CatalogRepository()

    async def create_product(
        self, db: AsyncSession, seller_id: str, req: ProductCreateRequest
    ) -> ProductResponse:
        product = Product(
            id=generate_id(),
            seller_id=seller_id,
            name=req.name,
            description=req.description,
            price=req.price_cents,
            category=req.category,
            stock=req.stock,
            image=req.image,
        )
        try:
            created = await self._repo.create_product(db, product)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Product %s created by seller %s", created.id, seller_id)
        return ProductResponse.from_domain(created)

    async def get_product(self, db: AsyncSession, product_id: str) -> ProductResponse:
        product = await self._repo.get_product(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return ProductResponse.from_domain(product)

    async def update_product(
        self,
        db: AsyncSession,
        product_id: str,
        req: ProductUpdateRequest,
        actor_id: str,
        actor_role: str,
    ) -> ProductResponse:
        await self._load_owned(db, product_id, actor_id, actor_role)
        try:
            updated = await self._repo.update_product(db, product_id, req.to_changes())
            if updated is None:
                raise ProductNotFoundError(product_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ProductResponse.from_domain(updated)

    async def delete_product(
        self, db: AsyncSession, product_id: str, actor_id: str, actor_role: str
    ) -> None:
        await self._load_owned(db, product_id, actor_id, actor_role)
        try:
            if not await self._repo.delete_product(db, product_id):
                raise ProductNotFoundError(product_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Product %s deleted by %s (%s)", product_id, actor_id, actor_role)

    async def list_products(
        self, db: AsyncSession, filters: ProductFilter, limit: int
    ) -> ProductListResponse:
        products = await self._repo.list_products(db, filters, limit)
        items = [ProductResponse.from_domain(p) for p in products]
        return ProductListResponse(items=items, total=len(items))

    async def list_low_stock(self, db: AsyncSession, threshold: int) -> ProductListResponse:
        products = await self._repo.list_low_stock(db, threshold)
        items = [ProductResponse.from_domain(p) for p in products]
        return ProductListResponse(items=items, total=len(items))

    async def list_by_seller(self, db: AsyncSession, seller_id: str) -> ProductListResponse:
        products = await self._repo.list_by_seller(db, seller_id)
        items = [ProductResponse.from_domain(p) for p in products]
        return ProductListResponse(items=items, total=len(items))

    async def _load_owned(
        self, db: AsyncSession, product_id: str, actor_id: str, actor_role: str
    ) -> Product:
        product = await self._repo.get_product(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if actor_role != UserRole.ADMIN.value and product.seller_id != actor_id:
            raise ForbiddenError("Only the owning seller or an admin may modify this product")
        return product
