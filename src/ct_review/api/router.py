"""ct_review REST endpoints.

POST   /reviews                       — buyer reviews a product (once)
PUT    /reviews/{review_id}           — owner edits rating/comment
DELETE /reviews/{review_id}           — owner or admin deletes
GET    /reviews/product/{product_id}  — public list for a product
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.database import get_db_session
from src.ct_common.response import ApiResponse, respond
from src.ct_gateway.auth.dependencies import get_current_user
from src.ct_gateway.user.db_models import UserModel
from src.ct_review.application.schemas import ReviewCreateRequest, ReviewUpdateRequest
from src.ct_review.application.service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])

_service = ReviewService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_review(db, str(current_user.id), current_user.role, body)
    return respond(request, result.model_dump())


@router.put("/{review_id}")
async def update_review(
    review_id: str,
    body: ReviewUpdateRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update_review(db, review_id, str(current_user.id), body)
    return respond(request, result.model_dump())


@router.delete("/{review_id}")
async def delete_review(
    review_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.delete_review(db, review_id, str(current_user.id), current_user.role)
    return respond(request, {"review_id": review_id, "deleted": True})


@router.get("/product/{product_id}")
async def list_product_reviews(
    product_id: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.list_for_product(db, product_id)
    return respond(request, [r.model_dump() for r in result])
