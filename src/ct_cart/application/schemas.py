"""Pydantic schemas for ct_cart API."""

from pydantic import BaseModel, Field

from src.ct_cart.domain.models import CartItem
from src.ct_common.cents import cents_to_display, line_total


class CartAddRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0, le=1000)


class CartUpdateRequest(BaseModel):
    quantity: int = Field(..., gt=0, le=1000)


class CartLineResponse(BaseModel):
    product_id: str
    product_name: str | None
    quantity: int
    price_cents: int | None
    line_total_cents: int | None

    @classmethod
    def from_domain(cls, item: CartItem) -> "CartLineResponse":
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            price_cents=item.price,
            line_total_cents=(
                line_total(item.price, item.quantity) if item.price is not None else None
            ),
        )


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    total_cents: int
    total_display: str

    @classmethod
    def from_items(cls, items: list[CartItem]) -> "CartResponse":
        lines = [CartLineResponse.from_domain(i) for i in items]
        total = sum(line.line_total_cents or 0 for line in lines)
        return cls(items=lines, total_cents=total, total_display=cents_to_display(total))
