"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    SELLER = "seller"
    BUYER = "buyer"


class PaymentMethod(str, Enum):
    BALANCE = "balance"
    CARD = "card"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RELEASED = "released"   # admin has released payment to sellers
    REFUNDED = "refunded"   # admin has refunded the buyer


class OrderAction(str, Enum):
    """Actor intents that move an order between statuses."""
    MARK_PAID = "MARK_PAID"
    SHIP = "SHIP"
    DELIVER = "DELIVER"
    CANCEL = "CANCEL"
    RELEASE = "RELEASE"
    REFUND = "REFUND"


class LedgerEntryType(str, Enum):
    # Funding
    DEPOSIT = "DEPOSIT"
    # Placement (buyer debit + seller pending credit)
    ORDER_PAYMENT = "ORDER_PAYMENT"
    SALE_PENDING_CREDIT = "SALE_PENDING_CREDIT"
    # Release (seller pending -> available)
    PAYOUT_RELEASE = "PAYOUT_RELEASE"
    # Refund (buyer credit + seller pending debit)
    REFUND_CREDIT = "REFUND_CREDIT"
    REFUND_PENDING_DEBIT = "REFUND_PENDING_DEBIT"
    # Cancellation (buyer credit + seller pending debit)
    CANCEL_REFUND = "CANCEL_REFUND"
    CANCEL_PENDING_DEBIT = "CANCEL_PENDING_DEBIT"
