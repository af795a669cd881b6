"""Pydantic schemas for ct_review API."""

from typing import Any

from pydantic import BaseModel, Field

from src.ct_common.datetime_utils import isoformat_or_none


class ReviewCreateRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=2000)


class ReviewUpdateRequest(BaseModel):
    rating: int | None = Field(None, ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    id: str
    user_id: str
    user_name: str | None = None
    product_id: str
    rating: int
    comment: str
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_row(cls, row: Any) -> "ReviewResponse":
        return cls(
            id=row.id,
            user_id=str(row.user_id),
            user_name=getattr(row, "user_name", None),
            product_id=row.product_id,
            rating=row.rating,
            comment=row.comment,
            created_at=isoformat_or_none(row.created_at),
            updated_at=isoformat_or_none(row.updated_at),
        )
