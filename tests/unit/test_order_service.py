"""Unit tests for OrderQueryService using a mock repository."""

from unittest.mock import AsyncMock

import pytest

from src.ct_common.errors import (
    ForbiddenError,
    MissingShippingAddressError,
    OrderNotEditableError,
    OrderNotFoundError,
)
from src.ct_order.application.service import OrderQueryService, can_view
from src.ct_order.domain.models import Order, OrderItem, SellerSummary


def _order(status: str = "pending", address: str = "1 Main St") -> Order:
    return Order(
        id="o-1",
        user_id="buyer-1",
        total_amount=7000,
        payment_method="balance",
        shipping_address=address,
        status=status,
        items=[
            OrderItem("p-s", "seller-s", "Desk lamp", 3000, 2),
            OrderItem("p-t", "seller-t", "Light bulb", 1000, 1),
        ],
    )


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


class TestCanView:
    def test_admin(self) -> None:
        assert can_view(_order(), "admin-1", "admin")

    def test_owner(self) -> None:
        assert can_view(_order(), "buyer-1", "buyer")

    def test_other_buyer(self) -> None:
        assert not can_view(_order(), "buyer-2", "buyer")

    def test_seller_with_item(self) -> None:
        assert can_view(_order(), "seller-t", "seller")

    def test_unrelated_seller(self) -> None:
        assert not can_view(_order(), "seller-x", "seller")


class TestGetOrder:
    async def test_response_shape(self, repo, db) -> None:
        repo.get_by_id.return_value = _order()

        resp = await OrderQueryService(repo).get_order(db, "o-1", "buyer-1", "buyer")

        assert resp.total_amount_cents == 7000
        assert resp.total_amount_display == "$70.00"
        assert [i.line_total_cents for i in resp.items] == [6000, 1000]

    async def test_missing(self, repo, db) -> None:
        repo.get_by_id.return_value = None
        with pytest.raises(OrderNotFoundError):
            await OrderQueryService(repo).get_order(db, "o-1", "admin-1", "admin")

    async def test_forbidden(self, repo, db) -> None:
        repo.get_by_id.return_value = _order()
        with pytest.raises(ForbiddenError):
            await OrderQueryService(repo).get_order(db, "o-1", "buyer-2", "buyer")


class TestListings:
    async def test_user_orders_self_only(self, repo, db) -> None:
        with pytest.raises(ForbiddenError):
            await OrderQueryService(repo).list_user_orders(db, "buyer-1", "buyer-2", "buyer", 50)

    async def test_admin_lists_any_user(self, repo, db) -> None:
        repo.list_by_user.return_value = [_order()]

        resp = await OrderQueryService(repo).list_user_orders(
            db, "buyer-1", "admin-1", "admin", 50
        )

        assert resp.total == 1

    async def test_seller_summary(self, repo, db) -> None:
        repo.seller_summary.return_value = SellerSummary(3, 7000, 1)

        resp = await OrderQueryService(repo).seller_summary(db, "seller-s")

        assert resp.total_revenue_display == "$70.00"
        assert resp.order_count == 1


class TestUpdateShippingAddress:
    async def test_owner_edits_pending_order(self, repo, db) -> None:
        repo.get_for_update.return_value = _order()
        repo.update_shipping_address.return_value = _order(address="2 Elm St")

        resp = await OrderQueryService(repo).update_shipping_address(
            db, "o-1", "  2 Elm St ", "buyer-1"
        )

        assert resp.shipping_address == "2 Elm St"
        repo.update_shipping_address.assert_awaited_once_with(db, "o-1", "2 Elm St")
        db.commit.assert_awaited_once()

    async def test_blank_address(self, repo, db) -> None:
        with pytest.raises(MissingShippingAddressError):
            await OrderQueryService(repo).update_shipping_address(db, "o-1", "   ", "buyer-1")
        repo.get_for_update.assert_not_called()

    async def test_not_owner(self, repo, db) -> None:
        repo.get_for_update.return_value = _order()
        with pytest.raises(ForbiddenError):
            await OrderQueryService(repo).update_shipping_address(db, "o-1", "x", "buyer-2")
        db.rollback.assert_awaited_once()

    @pytest.mark.parametrize("status", ["paid", "shipped", "released"])
    async def test_only_pending_editable(self, repo, db, status: str) -> None:
        repo.get_for_update.return_value = _order(status=status)
        with pytest.raises(OrderNotEditableError):
            await OrderQueryService(repo).update_shipping_address(db, "o-1", "x", "buyer-1")
