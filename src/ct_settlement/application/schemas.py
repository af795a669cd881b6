"""Request schemas for the settlement endpoints. Responses reuse OrderResponse."""

from pydantic import BaseModel, Field


class PlaceOrderRequest(BaseModel):
    shipping_address: str | None = Field(None, max_length=500)
    # Validated by the engine so card payments surface as Unsupported, not 422
    payment_method: str = Field("balance", max_length=20)


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., max_length=20)


class PayoutStatusRequest(BaseModel):
    status: str = Field(..., max_length=20, description="released or refunded")
