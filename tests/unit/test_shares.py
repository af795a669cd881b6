"""Tests for per-seller share aggregation."""

from src.ct_order.domain.models import OrderItem
from src.ct_settlement.domain.shares import aggregate_seller_shares, order_total


def _item(product_id: str, seller_id: str, price: int, quantity: int) -> OrderItem:
    return OrderItem(
        product_id=product_id, seller_id=seller_id, name=product_id,
        price=price, quantity=quantity,
    )


ITEMS = [
    _item("p-s", "seller-s", 3000, 2),
    _item("p-t", "seller-t", 1000, 1),
    _item("p-s2", "seller-s", 500, 3),
]


class TestOrderTotal:
    def test_sum_of_lines(self) -> None:
        assert order_total(ITEMS) == 6000 + 1000 + 1500

    def test_empty(self) -> None:
        assert order_total([]) == 0


class TestAggregateSellerShares:
    def test_one_entry_per_seller(self) -> None:
        assert aggregate_seller_shares(ITEMS) == {"seller-s": 7500, "seller-t": 1000}

    def test_shares_sum_to_total(self) -> None:
        assert sum(aggregate_seller_shares(ITEMS).values()) == order_total(ITEMS)

    def test_price_override(self) -> None:
        shares = aggregate_seller_shares(ITEMS, {"p-s": 3500})
        assert shares == {"seller-s": 7000 + 1500, "seller-t": 1000}

    def test_missing_override_keeps_snapshot(self) -> None:
        assert aggregate_seller_shares(ITEMS, {}) == aggregate_seller_shares(ITEMS)
