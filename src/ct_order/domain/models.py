"""Order domain model — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.ct_common.cents import line_total
from src.ct_common.enums import OrderStatus

# Once reached, no further status change or balance movement is allowed
FINALIZED_STATUSES = frozenset(
    {OrderStatus.CANCELLED.value, OrderStatus.RELEASED.value, OrderStatus.REFUNDED.value}
)


@dataclass
class OrderItem:
    """Line snapshot taken at placement; never re-read from the catalog."""

    product_id: str
    seller_id: str
    name: str
    price: int  # cents, at placement time
    quantity: int

    @property
    def line_total(self) -> int:
        return line_total(self.price, self.quantity)


@dataclass
class Order:
    id: str
    user_id: str  # buyer
    total_amount: int  # cents, immutable after placement
    payment_method: str
    shipping_address: str
    status: str = OrderStatus.PENDING.value
    items: list[OrderItem] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_finalized(self) -> bool:
        return self.status in FINALIZED_STATUSES

    @property
    def seller_ids(self) -> set[str]:
        return {item.seller_id for item in self.items}

    def involves_seller(self, seller_id: str) -> bool:
        return seller_id in self.seller_ids


@dataclass
class ProductSales:
    product_id: str
    name: str
    units_sold: int


@dataclass
class SellerSummary:
    total_units: int
    total_revenue: int  # cents, snapshot prices
    order_count: int
