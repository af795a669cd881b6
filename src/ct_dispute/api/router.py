"""ct_dispute REST endpoints.

POST /disputes                       — buyer opens a dispute on their order
GET  /disputes/mine                  — caller's disputes as buyer
GET  /disputes/for-seller            — disputes routed to the calling seller
GET  /disputes                       — all disputes (admin)
PUT  /disputes/{dispute_id}/resolve  — mark resolved (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.database import get_db_session
from src.ct_common.enums import UserRole
from src.ct_common.response import ApiResponse, respond
from src.ct_dispute.application.schemas import DisputeCreateRequest
from src.ct_dispute.application.service import DisputeService
from src.ct_gateway.auth.dependencies import get_current_user, require_admin, require_roles
from src.ct_gateway.user.db_models import UserModel

router = APIRouter(prefix="/disputes", tags=["disputes"])

_service = DisputeService()
_require_seller = require_roles(UserRole.SELLER)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_dispute(
    body: DisputeCreateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_dispute(db, str(current_user.id), body)
    return respond(request, result.model_dump())


@router.get("/mine")
async def list_my_disputes(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_for_buyer(db, str(current_user.id))
    return respond(request, [d.model_dump() for d in result])


@router.get("/for-seller")
async def list_seller_disputes(
    request: Request,
    current_user: Annotated[UserModel, Depends(_require_seller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_for_seller(db, str(current_user.id))
    return respond(request, [d.model_dump() for d in result])


@router.get("")
async def list_all_disputes(
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_all(db)
    return respond(request, [d.model_dump() for d in result])


@router.put("/{dispute_id}/resolve")
async def resolve_dispute(
    dispute_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.resolve(db, dispute_id)
    return respond(request, result.model_dump())
