"""Order read endpoints (writes that move money are in ct_settlement's router).

GET /orders/all              — every order (admin or seller)
GET /orders/seller/orders    — orders containing the caller's products
GET /orders/by-product       — units sold per product, best sellers first
GET /orders/seller/summary   — units and revenue over the caller's lines
GET /orders/user/{user_id}   — one buyer's orders (self or admin)
GET /orders/{order_id}       — detail (buyer, involved seller, or admin)
PUT /orders/{order_id}       — edit shipping address (buyer, pending only)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.database import get_db_session
from src.ct_common.enums import UserRole
from src.ct_common.response import ApiResponse, respond
from src.ct_gateway.auth.dependencies import get_current_user, require_roles
from src.ct_gateway.user.db_models import UserModel
from src.ct_order.application.schemas import ShippingAddressUpdateRequest
from src.ct_order.application.service import OrderQueryService

router = APIRouter(prefix="/orders", tags=["orders"])

_service = OrderQueryService()
_require_seller = require_roles(UserRole.SELLER)
_require_staff = require_roles(UserRole.ADMIN, UserRole.SELLER)


@router.get("/all")
async def list_all_orders(
    request: Request,
    current_user: Annotated[UserModel, Depends(_require_staff)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    result = await _service.list_all(db, limit)
    return respond(request, result.model_dump())


@router.get("/seller/orders")
async def list_seller_orders(
    request: Request,
    current_user: Annotated[UserModel, Depends(_require_seller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    result = await _service.list_seller_orders(db, str(current_user.id), limit)
    return respond(request, result.model_dump())


@router.get("/by-product")
async def sales_by_product(
    request: Request,
    current_user: Annotated[UserModel, Depends(_require_seller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.sales_by_product(db, str(current_user.id))
    return respond(request, [item.model_dump() for item in result])


@router.get("/seller/summary")
async def seller_summary(
    request: Request,
    current_user: Annotated[UserModel, Depends(_require_seller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.seller_summary(db, str(current_user.id))
    return respond(request, result.model_dump())


@router.get("/user/{user_id}")
async def list_user_orders(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    result = await _service.list_user_orders(
        db, user_id, str(current_user.id), current_user.role, limit
    )
    return respond(request, result.model_dump())


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_order(db, order_id, str(current_user.id), current_user.role)
    return respond(request, result.model_dump())


@router.put("/{order_id}")
async def update_shipping_address(
    order_id: str,
    body: ShippingAddressUpdateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update_shipping_address(
        db, order_id, body.shipping_address, str(current_user.id)
    )
    return respond(request, result.model_dump())
