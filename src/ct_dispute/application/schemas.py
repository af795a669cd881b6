"""Pydantic schemas for ct_dispute API."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.ct_common.datetime_utils import isoformat_or_none


class DisputeCreateRequest(BaseModel):
    order_id: str = Field(..., min_length=1)
    message: str = Field(..., max_length=5000)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v.strip()


class DisputeResponse(BaseModel):
    id: str
    order_id: str
    buyer_id: str
    seller_id: str
    message: str
    resolved: bool
    order_status: str | None = None
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_row(cls, row: Any) -> "DisputeResponse":
        return cls(
            id=row.id,
            order_id=row.order_id,
            buyer_id=str(row.buyer_id),
            seller_id=str(row.seller_id),
            message=row.message,
            resolved=row.resolved,
            order_status=getattr(row, "order_status", None),
            created_at=isoformat_or_none(row.created_at),
            updated_at=isoformat_or_none(row.updated_at),
        )
