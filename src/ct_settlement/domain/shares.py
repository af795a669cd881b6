"""Per-seller share aggregation over order line items."""

from collections.abc import Iterable, Mapping

from src.ct_common.cents import line_total
from src.ct_order.domain.models import OrderItem


def order_total(items: Iterable[OrderItem]) -> int:
    """Sum of price x quantity over all lines, in cents."""
    return sum(item.line_total for item in items)


def aggregate_seller_shares(
    items: Iterable[OrderItem], prices: Mapping[str, int] | None = None
) -> dict[str, int]:
    """Sum price x quantity per distinct seller.

    *prices* overrides the snapshot price by product id; products missing from
    it keep their snapshot price.
    """
    shares: dict[str, int] = {}
    for item in items:
        price = item.price
        if prices is not None:
            price = prices.get(item.product_id, item.price)
        shares[item.seller_id] = shares.get(item.seller_id, 0) + line_total(price, item.quantity)
    return shares
