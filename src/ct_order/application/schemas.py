"""Pydantic schemas for order API responses (shared with ct_settlement)."""

from pydantic import BaseModel, Field

from src.ct_common.cents import cents_to_display
from src.ct_common.datetime_utils import isoformat_or_none
from src.ct_order.domain.models import Order, OrderItem, ProductSales, SellerSummary


class ShippingAddressUpdateRequest(BaseModel):
    shipping_address: str = Field(..., max_length=500)


class OrderItemResponse(BaseModel):
    product_id: str
    seller_id: str
    name: str
    price_cents: int
    quantity: int
    line_total_cents: int

    @classmethod
    def from_domain(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            product_id=item.product_id,
            seller_id=item.seller_id,
            name=item.name,
            price_cents=item.price,
            quantity=item.quantity,
            line_total_cents=item.line_total,
        )


class OrderResponse(BaseModel):
    id: str
    user_id: str
    items: list[OrderItemResponse]
    total_amount_cents: int
    total_amount_display: str
    payment_method: str
    shipping_address: str
    status: str
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            user_id=order.user_id,
            items=[OrderItemResponse.from_domain(i) for i in order.items],
            total_amount_cents=order.total_amount,
            total_amount_display=cents_to_display(order.total_amount),
            payment_method=order.payment_method,
            shipping_address=order.shipping_address,
            status=order.status,
            created_at=isoformat_or_none(order.created_at),
            updated_at=isoformat_or_none(order.updated_at),
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    total: int

    @classmethod
    def from_orders(cls, orders: list[Order]) -> "OrderListResponse":
        return cls(items=[OrderResponse.from_domain(o) for o in orders], total=len(orders))


class ProductSalesItem(BaseModel):
    product_id: str
    name: str
    units_sold: int

    @classmethod
    def from_domain(cls, s: ProductSales) -> "ProductSalesItem":
        return cls(product_id=s.product_id, name=s.name, units_sold=s.units_sold)


class SellerSummaryResponse(BaseModel):
    total_units: int
    total_revenue_cents: int
    total_revenue_display: str
    order_count: int

    @classmethod
    def from_domain(cls, s: SellerSummary) -> "SellerSummaryResponse":
        return cls(
            total_units=s.total_units,
            total_revenue_cents=s.total_revenue,
            total_revenue_display=cents_to_display(s.total_revenue),
            order_count=s.order_count,
        )
