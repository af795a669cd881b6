"""Settlement endpoints — the order operations that move money or stock.

POST /orders/place                    — place the caller's cart as an order
PUT  /orders/{order_id}/status        — paid / shipped / delivered / cancelled
POST /orders/{order_id}/cancel        — shorthand for status=cancelled
PUT  /orders/{order_id}/payout-status — admin release or refund
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.database import get_db_session
from src.ct_common.response import ApiResponse, respond
from src.ct_gateway.auth.dependencies import get_current_user
from src.ct_gateway.user.db_models import UserModel
from src.ct_order.application.schemas import OrderResponse
from src.ct_settlement.application.engine import SettlementEngine
from src.ct_settlement.application.schemas import (
    PayoutStatusRequest,
    PlaceOrderRequest,
    StatusUpdateRequest,
)

router = APIRouter(prefix="/orders", tags=["settlement"])

_engine = SettlementEngine()


@router.post("/place", status_code=status.HTTP_201_CREATED)
async def place_order(
    body: PlaceOrderRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    order = await _engine.place_order(
        db, str(current_user.id), body.shipping_address, body.payment_method
    )
    return respond(request, OrderResponse.from_domain(order).model_dump())


@router.put("/{order_id}/status")
async def update_status(
    order_id: str,
    body: StatusUpdateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    order = await _engine.update_status(
        db, order_id, body.status, str(current_user.id), current_user.role
    )
    return respond(request, OrderResponse.from_domain(order).model_dump())


@router.post("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    order = await _engine.cancel_order(db, order_id, str(current_user.id), current_user.role)
    return respond(request, OrderResponse.from_domain(order).model_dump())


@router.put("/{order_id}/payout-status")
async def set_payout_status(
    order_id: str,
    body: PayoutStatusRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    order = await _engine.set_payout_status(
        db, order_id, body.status, str(current_user.id), current_user.role
    )
    return respond(request, OrderResponse.from_domain(order).model_dump())
