"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Account
  3xxx: Catalog
  4xxx: Order/Settlement
  5xxx: Cart
  6xxx: Review/Dispute
  9xxx: System

Every error also carries a ``kind`` from ErrorKind so API clients can branch
on the failure category without knowing individual codes.
"""

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFLICT = "CONFLICT"
    UNSUPPORTED = "UNSUPPORTED"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL = "INTERNAL"


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        kind: ErrorKind = ErrorKind.INTERNAL,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.kind = kind
        super().__init__(message)


# --- 1xxx: Auth/User ---

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409, ErrorKind.CONFLICT)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid email or password", 401, ErrorKind.UNAUTHORIZED)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403, ErrorKind.UNAUTHORIZED)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(
            1005, "Refresh token is invalid or expired", 401, ErrorKind.UNAUTHORIZED
        )


class InvalidAdminPasskeyError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Invalid admin passkey", 401, ErrorKind.UNAUTHORIZED)


class ForbiddenError(AppError):
    """Wrong role or wrong owner for the requested action."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(1007, detail, 403, ErrorKind.UNAUTHORIZED)


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1008, f"User not found: {user_id}", 404, ErrorKind.NOT_FOUND)


# --- 2xxx: Account ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} cents, available {available} cents",
            422,
            ErrorKind.INSUFFICIENT_FUNDS,
        )


class AccountNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(
            2002, f"Account not found for user {user_id}", 404, ErrorKind.NOT_FOUND
        )


# --- 3xxx: Catalog ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(3001, f"Product not found: {product_id}", 404, ErrorKind.NOT_FOUND)


class InsufficientStockError(AppError):
    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            3002,
            f"Not enough stock for {product_name}: requested {requested}, available {available}",
            422,
            ErrorKind.INSUFFICIENT_STOCK,
        )


# --- 4xxx: Order/Settlement ---

class EmptyCartError(AppError):
    def __init__(self) -> None:
        super().__init__(4001, "Cart is empty", 422, ErrorKind.VALIDATION)


class InvalidPaymentMethodError(AppError):
    def __init__(self, method: str) -> None:
        super().__init__(4002, f"Invalid payment method: {method}", 422, ErrorKind.VALIDATION)


class UnsupportedPaymentMethodError(AppError):
    def __init__(self, method: str) -> None:
        super().__init__(
            4003, f"Payment method not supported yet: {method}", 501, ErrorKind.UNSUPPORTED
        )


class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4004, f"Order not found: {order_id}", 404, ErrorKind.NOT_FOUND)


class MissingShippingAddressError(AppError):
    def __init__(self) -> None:
        super().__init__(4005, "Shipping address is required", 422, ErrorKind.VALIDATION)


class OrderAlreadyFinalizedError(AppError):
    def __init__(self, order_id: str, status: str) -> None:
        super().__init__(
            4006,
            f"Order {order_id} already processed (status={status})",
            409,
            ErrorKind.CONFLICT,
        )


class InvalidStatusTransitionError(AppError):
    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            4007,
            f"Order in status {current} cannot move to {target}",
            422,
            ErrorKind.VALIDATION,
        )


class InvalidPayoutStatusError(AppError):
    def __init__(self, status: str) -> None:
        super().__init__(
            4008,
            f"Invalid payout status: {status} (expected released or refunded)",
            422,
            ErrorKind.VALIDATION,
        )


class OrderNotEditableError(AppError):
    def __init__(self, order_id: str, status: str) -> None:
        super().__init__(
            4009,
            f"Order {order_id} in status {status} can no longer be edited",
            409,
            ErrorKind.CONFLICT,
        )


# --- 5xxx: Cart ---

class CartItemNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(5001, f"Product not in cart: {product_id}", 404, ErrorKind.NOT_FOUND)


# --- 6xxx: Review/Dispute ---

class ReviewExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(6001, "You already reviewed this product", 409, ErrorKind.CONFLICT)


class ReviewNotFoundError(AppError):
    def __init__(self, review_id: str) -> None:
        super().__init__(6002, f"Review not found: {review_id}", 404, ErrorKind.NOT_FOUND)


class DisputeNotFoundError(AppError):
    def __init__(self, dispute_id: str) -> None:
        super().__init__(6003, f"Dispute not found: {dispute_id}", 404, ErrorKind.NOT_FOUND)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429, ErrorKind.RATE_LIMITED)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500, ErrorKind.INTERNAL)


class SettlementTimeoutError(AppError):
    def __init__(self, operation: str) -> None:
        super().__init__(
            9003, f"Settlement operation timed out: {operation}", 504, ErrorKind.INTERNAL
        )


class InvalidCursorError(AppError):
    def __init__(self, cursor: str) -> None:
        super().__init__(
            9004, f"Malformed pagination cursor: {cursor!r}", 400, ErrorKind.VALIDATION
        )
