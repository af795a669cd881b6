"""User profile API: own profile read/edit, admin listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.database import get_db_session
from src.ct_common.response import ApiResponse, respond
from src.ct_gateway.auth.dependencies import get_current_user, require_admin
from src.ct_gateway.user.db_models import UserModel
from src.ct_gateway.user.schemas import ProfileUpdateRequest, RoleLiteral, UserProfile
from src.ct_gateway.user.service import UserService

router = APIRouter(prefix="/users", tags=["users"])
_service = UserService()


@router.get("/me")
async def get_me(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    request: Request,
) -> ApiResponse:
    return respond(request, UserProfile.from_model(current_user).model_dump())


@router.put("/me")
async def update_me(
    body: ProfileUpdateRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    user = await _service.update_user(
        str(current_user.id), body.model_dump(exclude_none=True), db
    )
    return respond(request, UserProfile.from_model(user).model_dump())


@router.get("")
async def list_users(
    _admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    role: RoleLiteral | None = Query(None, description="Filter by role"),
) -> ApiResponse:
    users = await _service.list_users(role, db)
    return respond(request, [UserProfile.from_model(u).model_dump() for u in users])
