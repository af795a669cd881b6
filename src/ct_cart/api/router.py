"""ct_cart REST endpoints (authenticated; every route acts on the caller's cart).

POST   /carts/add                    — add a product (quantities accumulate)
GET    /carts                        — current cart with line totals
PUT    /carts/update/{product_id}    — set a line's quantity
DELETE /carts/remove/{product_id}    — drop a line
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_cart.application.schemas import CartAddRequest, CartUpdateRequest
from src.ct_cart.application.service import CartService
from src.ct_common.database import get_db_session
from src.ct_common.response import ApiResponse, respond
from src.ct_gateway.auth.dependencies import get_current_user
from src.ct_gateway.user.db_models import UserModel

router = APIRouter(prefix="/carts", tags=["carts"])

_service = CartService()


@router.post("/add")
async def add_to_cart(
    body: CartAddRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.add_item(db, str(current_user.id), body.product_id, body.quantity)
    return respond(request, result.model_dump())


@router.get("")
async def get_cart(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_cart(db, str(current_user.id))
    return respond(request, result.model_dump())


@router.put("/update/{product_id}")
async def update_cart_item(
    product_id: str,
    body: CartUpdateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update_quantity(db, str(current_user.id), product_id, body.quantity)
    return respond(request, result.model_dump())


@router.delete("/remove/{product_id}")
async def remove_cart_item(
    product_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.remove_item(db, str(current_user.id), product_id)
    return respond(request, {"product_id": product_id, "removed": True})
