"""Domain models for ct_catalog — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Product:
    id: str
    seller_id: str
    name: str
    price: int                 # cents
    stock: int
    description: str | None = None
    category: str | None = None
    image: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class ProductFilter:
    """Listing filters; None means "no constraint"."""

    search: str | None = None
    category: str | None = None
    min_price: int | None = None
    max_price: int | None = None
    min_stock: int | None = None
    max_stock: int | None = None
    sort: str = "created_at"       # price / stock / name / created_at
    descending: bool = True
