"""Order status state machine.

All status changes, including release and refund, are validated here against
one table keyed by (current status, action). Routes and services never
compare status strings themselves.
"""

from src.ct_common.enums import OrderAction, OrderStatus, UserRole
from src.ct_common.errors import (
    ForbiddenError,
    InvalidStatusTransitionError,
    OrderAlreadyFinalizedError,
)
from src.ct_order.domain.models import FINALIZED_STATUSES

_ADMIN = frozenset({UserRole.ADMIN.value})
_STAFF = frozenset({UserRole.ADMIN.value, UserRole.SELLER.value})
_ANYONE = frozenset({UserRole.ADMIN.value, UserRole.SELLER.value, UserRole.BUYER.value})

ACTION_TARGETS: dict[OrderAction, OrderStatus] = {
    OrderAction.MARK_PAID: OrderStatus.PAID,
    OrderAction.SHIP: OrderStatus.SHIPPED,
    OrderAction.DELIVER: OrderStatus.DELIVERED,
    OrderAction.CANCEL: OrderStatus.CANCELLED,
    OrderAction.RELEASE: OrderStatus.RELEASED,
    OrderAction.REFUND: OrderStatus.REFUNDED,
}

# Statuses a caller may request through the generic status update
STATUS_ACTIONS: dict[str, OrderAction] = {
    OrderStatus.PAID.value: OrderAction.MARK_PAID,
    OrderStatus.SHIPPED.value: OrderAction.SHIP,
    OrderStatus.DELIVERED.value: OrderAction.DELIVER,
    OrderStatus.CANCELLED.value: OrderAction.CANCEL,
}

_OPEN = (
    OrderStatus.PENDING.value,
    OrderStatus.PAID.value,
    OrderStatus.SHIPPED.value,
    OrderStatus.DELIVERED.value,
)


def _build_table() -> dict[tuple[str, OrderAction], frozenset[str]]:
    table: dict[tuple[str, OrderAction], frozenset[str]] = {
        (OrderStatus.PENDING.value, OrderAction.MARK_PAID): _STAFF,
        (OrderStatus.PENDING.value, OrderAction.CANCEL): _ANYONE,
        (OrderStatus.PAID.value, OrderAction.CANCEL): _STAFF,
    }
    for status in _OPEN:
        table[(status, OrderAction.SHIP)] = _STAFF
        table[(status, OrderAction.DELIVER)] = _STAFF
        table[(status, OrderAction.RELEASE)] = _ADMIN
        table[(status, OrderAction.REFUND)] = _ADMIN
    return table


TRANSITIONS: dict[tuple[str, OrderAction], frozenset[str]] = _build_table()


def is_terminal(status: str) -> bool:
    return status in FINALIZED_STATUSES


def resolve_transition(
    order_id: str, status: str, action: OrderAction, role: str
) -> OrderStatus:
    """Return the status *action* leads to, or raise.

    Checked in order: finalized order (Conflict), unknown transition
    (Validation), role not permitted (Unauthorized).
    """
    target = ACTION_TARGETS[action]
    if is_terminal(status):
        raise OrderAlreadyFinalizedError(order_id, status)
    allowed = TRANSITIONS.get((status, action))
    if allowed is None:
        raise InvalidStatusTransitionError(status, target.value)
    if role not in allowed:
        raise ForbiddenError(f"Role {role} may not {action.value} an order in status {status}")
    return target
