"""Tests for the order status state machine."""

import pytest

from src.ct_common.enums import OrderAction, OrderStatus
from src.ct_common.errors import (
    ForbiddenError,
    InvalidStatusTransitionError,
    OrderAlreadyFinalizedError,
)
from src.ct_settlement.domain.state_machine import (
    ACTION_TARGETS,
    STATUS_ACTIONS,
    TRANSITIONS,
    is_terminal,
    resolve_transition,
)


class TestTable:
    def test_every_action_has_a_target(self) -> None:
        assert set(ACTION_TARGETS) == set(OrderAction)

    def test_no_transition_out_of_terminal_status(self) -> None:
        for status, _ in TRANSITIONS:
            assert not is_terminal(status)

    def test_generic_update_cannot_reach_payout_statuses(self) -> None:
        assert "released" not in STATUS_ACTIONS
        assert "refunded" not in STATUS_ACTIONS
        assert "pending" not in STATUS_ACTIONS

    @pytest.mark.parametrize("status", ["cancelled", "released", "refunded"])
    def test_terminal(self, status: str) -> None:
        assert is_terminal(status)

    @pytest.mark.parametrize("status", ["pending", "paid", "shipped", "delivered"])
    def test_not_terminal(self, status: str) -> None:
        assert not is_terminal(status)


class TestResolveTransition:
    def test_release_from_pending(self) -> None:
        target = resolve_transition("o-1", "pending", OrderAction.RELEASE, "admin")
        assert target is OrderStatus.RELEASED

    @pytest.mark.parametrize("status", ["pending", "paid", "shipped", "delivered"])
    def test_refund_from_any_open_status(self, status: str) -> None:
        assert resolve_transition("o-1", status, OrderAction.REFUND, "admin") is (
            OrderStatus.REFUNDED
        )

    @pytest.mark.parametrize("status", ["cancelled", "released", "refunded"])
    @pytest.mark.parametrize("action", list(OrderAction))
    def test_finalized_orders_conflict(self, status: str, action: OrderAction) -> None:
        with pytest.raises(OrderAlreadyFinalizedError):
            resolve_transition("o-1", status, action, "admin")

    def test_finalized_check_precedes_role_check(self) -> None:
        with pytest.raises(OrderAlreadyFinalizedError):
            resolve_transition("o-1", "released", OrderAction.RELEASE, "buyer")

    @pytest.mark.parametrize("role", ["seller", "buyer"])
    def test_release_admin_only(self, role: str) -> None:
        with pytest.raises(ForbiddenError):
            resolve_transition("o-1", "pending", OrderAction.RELEASE, role)

    def test_buyer_may_cancel_pending(self) -> None:
        assert resolve_transition("o-1", "pending", OrderAction.CANCEL, "buyer") is (
            OrderStatus.CANCELLED
        )

    def test_buyer_may_not_cancel_paid(self) -> None:
        with pytest.raises(ForbiddenError):
            resolve_transition("o-1", "paid", OrderAction.CANCEL, "buyer")

    def test_seller_ships(self) -> None:
        assert resolve_transition("o-1", "paid", OrderAction.SHIP, "seller") is (
            OrderStatus.SHIPPED
        )

    @pytest.mark.parametrize("status", ["shipped", "delivered"])
    def test_cannot_cancel_after_shipping(self, status: str) -> None:
        with pytest.raises(InvalidStatusTransitionError):
            resolve_transition("o-1", status, OrderAction.CANCEL, "admin")

    def test_cannot_mark_paid_twice(self) -> None:
        with pytest.raises(InvalidStatusTransitionError):
            resolve_transition("o-1", "paid", OrderAction.MARK_PAID, "admin")
