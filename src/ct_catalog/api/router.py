"""ct_catalog REST endpoints.

POST   /products                 — create listing (seller or admin)
GET    /products                 — search/filter/sort listings
GET    /products/low-stock       — listings below a stock threshold
GET    /products/seller/mine     — the caller's own listings
GET    /products/{product_id}    — detail
PUT    /products/{product_id}    — partial update (owner or admin)
DELETE /products/{product_id}    — delete (owner or admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_catalog.application.schemas import (
    ProductCreateRequest,
    ProductUpdateRequest,
    SortField,
)
from src.ct_catalog.application.service import CatalogService
from src.ct_catalog.domain.models import ProductFilter
from src.ct_common.database import get_db_session
from src.ct_common.enums import UserRole
from src.ct_common.response import ApiResponse, respond
from src.ct_gateway.auth.dependencies import get_current_user, require_roles
from src.ct_gateway.user.db_models import UserModel

router = APIRouter(prefix="/products", tags=["products"])

_service = CatalogService()
_require_seller = require_roles(UserRole.SELLER, UserRole.ADMIN)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(_require_seller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_product(db, str(current_user.id), body)
    return respond(request, result.model_dump())


@router.get("")
async def list_products(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    search: str | None = Query(None, max_length=100),
    category: str | None = Query(None),
    min_price: int | None = Query(None, ge=0, description="Cents"),
    max_price: int | None = Query(None, ge=0, description="Cents"),
    min_stock: int | None = Query(None, ge=0),
    max_stock: int | None = Query(None, ge=0),
    sort: SortField = Query("created_at"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    filters = ProductFilter(
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        min_stock=min_stock,
        max_stock=max_stock,
        sort=sort,
        descending=order == "desc",
    )
    result = await _service.list_products(db, filters, limit)
    return respond(request, result.model_dump())


@router.get("/low-stock")
async def list_low_stock(
    request: Request,
    current_user: Annotated[UserModel, Depends(_require_seller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    threshold: int = Query(5, ge=1),
) -> ApiResponse:
    result = await _service.list_low_stock(db, threshold)
    return respond(request, result.model_dump())


@router.get("/seller/mine")
async def list_my_products(
    request: Request,
    current_user: Annotated[UserModel, Depends(_require_seller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_by_seller(db, str(current_user.id))
    return respond(request, result.model_dump())


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_product(db, product_id)
    return respond(request, result.model_dump())


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    body: ProductUpdateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update_product(
        db, product_id, body, str(current_user.id), current_user.role
    )
    return respond(request, result.model_dump())


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete_product(db, product_id, str(current_user.id), current_user.role)
    return respond(request, {"product_id": product_id, "deleted": True})
