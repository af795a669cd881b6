"""Account endpoints; every route acts on the caller's own account.

GET  /account/balance  — available, pending and total funds
POST /account/deposit  — simulated top-up (no payment provider involved)
GET  /account/ledger   — newest-first ledger page, optional entry_type filter
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.application.schemas import DepositRequest
from src.ct_account.application.service import AccountApplicationService
from src.ct_common.database import get_db_session
from src.ct_common.enums import LedgerEntryType
from src.ct_common.response import ApiResponse, respond
from src.ct_gateway.auth.dependencies import get_current_user
from src.ct_gateway.user.db_models import UserModel

router = APIRouter(prefix="/account", tags=["account"])

_service = AccountApplicationService()

CurrentUser = Annotated[UserModel, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@router.get("/balance")
async def get_balance(request: Request, user: CurrentUser, db: DbSession) -> ApiResponse:
    result = await _service.get_balance(db, str(user.id))
    return respond(request, result.model_dump())


@router.post("/deposit")
async def deposit(
    request: Request, body: DepositRequest, user: CurrentUser, db: DbSession
) -> ApiResponse:
    result = await _service.deposit(db, str(user.id), body.amount_cents)
    return respond(request, result.model_dump(), "Deposit recorded")


@router.get("/ledger")
async def list_ledger(
    request: Request,
    user: CurrentUser,
    db: DbSession,
    cursor: str | None = Query(None, description="next_cursor from the previous page"),
    limit: int = Query(20, ge=1, le=100),
    entry_type: LedgerEntryType | None = None,
) -> ApiResponse:
    result = await _service.list_ledger(
        db, str(user.id), cursor, limit, entry_type.value if entry_type else None
    )
    return respond(request, result.model_dump())
