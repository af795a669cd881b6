"""Admin REST API (every route requires the admin role).

GET    /admin/stats                  — user counts, revenue, top products
PUT    /admin/users/{user_id}        — edit any user
DELETE /admin/users/{user_id}        — delete a user
DELETE /admin/products/{product_id}  — delete any product
GET    /admin/invariants             — funds conservation report
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_admin.application.service import AdminService
from src.ct_common.database import get_db_session
from src.ct_common.response import ApiResponse, respond
from src.ct_gateway.auth.dependencies import require_admin
from src.ct_gateway.user.db_models import UserModel
from src.ct_gateway.user.schemas import AdminUserUpdateRequest, UserProfile
from src.ct_gateway.user.service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()
_users = UserService()


@router.get("/stats")
async def get_stats(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    return respond(request, await _service.get_stats(db))


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    body: AdminUserUpdateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await _users.update_user(user_id, body.model_dump(exclude_none=True), db)
    return respond(request, UserProfile.from_model(user).model_dump())


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _users.delete_user(user_id, db)
    return respond(request, {"user_id": user_id, "deleted": True})


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete_product(db, product_id)
    return respond(request, {"product_id": product_id, "deleted": True})


@router.get("/invariants")
async def verify_invariants(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    return respond(request, await _service.verify_invariants(db))
