"""Pydantic schemas for ct_catalog API."""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from src.ct_catalog.domain.models import Product
from src.ct_common.cents import cents_to_display
from src.ct_common.datetime_utils import isoformat_or_none

SortField = Literal["price", "stock", "name", "created_at"]
_NULLABLE = ("description", "category")

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ProductCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    price_cents: int = Field(..., ge=0)
    category: str | None = Field(None, max_length=100)
    stock: int = Field(..., ge=0)
    image: str = Field("", max_length=500, description="Image URL, stored as given")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class ProductUpdateRequest(BaseModel):
    """Partial update; omitted fields stay unchanged."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    price_cents: int | None = Field(None, ge=0)
    category: str | None = Field(None, max_length=100)
    stock: int | None = Field(None, ge=0)
    image: str | None = Field(None, max_length=500)

    def to_changes(self) -> dict[str, Any]:
        """Map the set fields onto product column names.

        An explicit null clears description or category; it is ignored for the
        NOT NULL columns.
        """
        data = self.model_dump(exclude_unset=True)
        if "price_cents" in data:
            data["price"] = data.pop("price_cents")
        return {
            k: v for k, v in data.items() if v is not None or k in _NULLABLE
        }


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ProductResponse(BaseModel):
    id: str
    seller_id: str
    name: str
    description: str | None
    price_cents: int
    price_display: str
    category: str | None
    stock: int
    image: str
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, p: Product) -> "ProductResponse":
        return cls(
            id=p.id,
            seller_id=p.seller_id,
            name=p.name,
            description=p.description,
            price_cents=p.price,
            price_display=cents_to_display(p.price),
            category=p.category,
            stock=p.stock,
            image=p.image,
            created_at=isoformat_or_none(p.created_at),
            updated_at=isoformat_or_none(p.updated_at),
        )


class ProductListResponse(BaseModel):
    items: list[ProductResponse]
    total: int
