"""Auth endpoints.

POST /auth/register  — create a user and its zero-balance account
POST /auth/login     — email + password, returns access and refresh tokens
POST /auth/refresh   — exchange a refresh token for a new access token
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.database import get_db_session
from src.ct_common.response import ApiResponse, respond
from src.ct_gateway.user.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    UserInfo,
)
from src.ct_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def register(request: Request, body: RegisterRequest, db: DbSession) -> ApiResponse:
    # User row and account row commit together or not at all
    async with db.begin():
        user = await _service.register(body, db)
    return respond(request, UserInfo.from_model(user).model_dump(), "User registered")


@router.post("/login", response_model=ApiResponse)
async def login(request: Request, body: LoginRequest, db: DbSession) -> ApiResponse:
    user, access_token, refresh_token = await _service.login(body.email, body.password, db)
    tokens = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserInfo.from_model(user),
    )
    return respond(request, tokens.model_dump(), "Login successful")


@router.post("/refresh", response_model=ApiResponse)
async def refresh_token(request: Request, body: RefreshRequest) -> ApiResponse:
    access_token = await _service.refresh(body.refresh_token)
    return respond(request, RefreshResponse(access_token=access_token).model_dump())
