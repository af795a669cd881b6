"""Domain models for ct_cart."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class CartItem:
    user_id: str
    product_id: str
    quantity: int
    # Joined from products for display; None once the product is deleted
    product_name: str | None = None
    price: int | None = None
    created_at: datetime | None = None
