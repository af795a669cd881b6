"""SettlementEngine — every balance movement tied to an order's lifecycle.

Each public operation is ONE database transaction bounded by
SETTLEMENT_TIMEOUT_SECONDS: all validation happens before the first write,
the session is committed on success and rolled back on any error, so a failed
operation leaves balances, stock and orders exactly as they were.

Lock order: placement takes the buyer's cart rows, then products by id, then
accounts by user_id; the other operations take the order row, then products
by id, then accounts by user_id. One global order keeps concurrent placements
and settlements touching the same rows from deadlocking. The cart lock also
makes a repeated placement of one cart wait for the first and then fail with
EmptyCartError instead of charging the buyer twice.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ct_account.domain.models import Account
from src.ct_account.domain.repository import AccountRepositoryProtocol
from src.ct_account.infrastructure.persistence import AccountRepository
from src.ct_cart.domain.repository import CartRepositoryProtocol
from src.ct_cart.infrastructure.persistence import CartRepository
from src.ct_catalog.domain.repository import CatalogRepositoryProtocol
from src.ct_catalog.infrastructure.persistence import CatalogRepository
from src.ct_common.datetime_utils import utc_now
from src.ct_common.enums import (
    LedgerEntryType,
    OrderAction,
    OrderStatus,
    PaymentMethod,
    UserRole,
)
from src.ct_common.errors import (
    AccountNotFoundError,
    EmptyCartError,
    ForbiddenError,
    InsufficientFundsError,
    InsufficientStockError,
    InvalidPaymentMethodError,
    InvalidPayoutStatusError,
    InvalidStatusTransitionError,
    MissingShippingAddressError,
    OrderNotFoundError,
    ProductNotFoundError,
    SettlementTimeoutError,
    UnsupportedPaymentMethodError,
)
from src.ct_common.id_generator import generate_id
from src.ct_order.domain.models import Order, OrderItem
from src.ct_order.domain.repository import OrderRepositoryProtocol
from src.ct_order.infrastructure.persistence import OrderRepository
from src.ct_settlement.domain.shares import aggregate_seller_shares, order_total
from src.ct_settlement.domain.state_machine import STATUS_ACTIONS, resolve_transition

logger = logging.getLogger(__name__)

_REF_TYPE = "order"


def _require_accounts(accounts: dict[str, Account], user_ids: Iterable[str]) -> None:
    for user_id in sorted(user_ids):
        if user_id not in accounts:
            raise AccountNotFoundError(user_id)


class SettlementEngine:
    def __init__(
        self,
        accounts: AccountRepositoryProtocol | None = None,
        catalog: CatalogRepositoryProtocol | None = None,
        orders: OrderRepositoryProtocol | None = None,
        carts: CartRepositoryProtocol | None = None,
        price_source: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._catalog: CatalogRepositoryProtocol = catalog or CatalogRepository()
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()
        self._carts: CartRepositoryProtocol = carts or CartRepository()
        self._price_source = price_source or settings.PAYOUT_PRICE_SOURCE
        self._timeout = timeout_seconds or settings.SETTLEMENT_TIMEOUT_SECONDS

    # ------------------------------------------------------------------
    # Transaction boundary
    # ------------------------------------------------------------------

    async def _run(
        self,
        db: AsyncSession,
        operation: str,
        work: Callable[[], Awaitable[Order]],
    ) -> Order:
        try:
            async with asyncio.timeout(self._timeout):
                order = await work()
                await db.commit()
        except TimeoutError:
            await db.rollback()
            logger.warning("%s timed out after %.1fs, rolled back", operation, self._timeout)
            raise SettlementTimeoutError(operation) from None
        except Exception as exc:
            await db.rollback()
            logger.warning("%s rolled back: %s", operation, exc)
            raise
        return order

    # ------------------------------------------------------------------
    # PlaceOrder
    # ------------------------------------------------------------------

    async def place_order(
        self,
        db: AsyncSession,
        buyer_id: str,
        shipping_address: str | None,
        payment_method: str,
    ) -> Order:
        if payment_method == PaymentMethod.CARD.value:
            raise UnsupportedPaymentMethodError(payment_method)
        if payment_method != PaymentMethod.BALANCE.value:
            raise InvalidPaymentMethodError(payment_method)
        address = (shipping_address or "").strip()
        if not address:
            raise MissingShippingAddressError()

        async def work() -> Order:
            cart = await self._carts.get_items_for_update(db, buyer_id)
            if not cart:
                raise EmptyCartError()

            products = await self._catalog.lock_products(db, [c.product_id for c in cart])
            items: list[OrderItem] = []
            for line in cart:
                product = products.get(line.product_id)
                if product is None:
                    raise ProductNotFoundError(line.product_id)
                if line.quantity > product.stock:
                    raise InsufficientStockError(product.name, line.quantity, product.stock)
                items.append(
                    OrderItem(
                        product_id=product.id,
                        seller_id=product.seller_id,
                        name=product.name,
                        price=product.price,
                        quantity=line.quantity,
                    )
                )

            total = order_total(items)
            shares = aggregate_seller_shares(items)
            participants = {buyer_id, *shares}
            accounts = await self._accounts.lock_accounts(db, sorted(participants))
            _require_accounts(accounts, participants)
            buyer = accounts[buyer_id]
            if buyer.balance < total:
                raise InsufficientFundsError(total, buyer.balance)

            # Validation complete; mutations from here on
            order = Order(
                id=generate_id(),
                user_id=buyer_id,
                total_amount=total,
                payment_method=payment_method,
                shipping_address=address,
                status=OrderStatus.PENDING.value,
                items=items,
                created_at=utc_now(),
            )
            for item in items:
                await self._catalog.decrement_stock(db, item.product_id, item.quantity)
            await self._accounts.adjust_balance(
                db, buyer_id, -total, 0,
                LedgerEntryType.ORDER_PAYMENT, _REF_TYPE, order.id,
                f"Payment for order {order.id}",
            )
            for seller_id, share in sorted(shares.items()):
                await self._accounts.adjust_balance(
                    db, seller_id, 0, share,
                    LedgerEntryType.SALE_PENDING_CREDIT, _REF_TYPE, order.id,
                    f"Pending earnings from order {order.id}",
                )
            await self._orders.save(db, order)
            await self._carts.clear(db, buyer_id)
            return order

        order = await self._run(db, "place_order", work)
        logger.info(
            "Order %s placed: buyer=%s total=%d lines=%d sellers=%d",
            order.id, buyer_id, order.total_amount, len(order.items), len(order.seller_ids),
        )
        return order

    # ------------------------------------------------------------------
    # SetPayoutStatus (release / refund)
    # ------------------------------------------------------------------

    async def set_payout_status(
        self,
        db: AsyncSession,
        order_id: str,
        target_status: str,
        actor_id: str,
        actor_role: str,
    ) -> Order:
        if actor_role != UserRole.ADMIN.value:
            raise ForbiddenError("Only admin can update payout status")
        if target_status == OrderStatus.RELEASED.value:
            action = OrderAction.RELEASE
        elif target_status == OrderStatus.REFUNDED.value:
            action = OrderAction.REFUND
        else:
            raise InvalidPayoutStatusError(target_status)

        async def work() -> Order:
            order = await self._orders.get_for_update(db, order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            target = resolve_transition(order.id, order.status, action, actor_role)

            prices = await self._payout_prices(db, order)
            shares = aggregate_seller_shares(order.items, prices)
            participants = set(shares)
            if action is OrderAction.REFUND:
                participants.add(order.user_id)
            accounts = await self._accounts.lock_accounts(db, sorted(participants))
            _require_accounts(accounts, participants)

            if action is OrderAction.RELEASE:
                for seller_id, share in sorted(shares.items()):
                    await self._accounts.adjust_balance(
                        db, seller_id, share, -share,
                        LedgerEntryType.PAYOUT_RELEASE, _REF_TYPE, order.id,
                        f"Payout released for order {order.id}",
                    )
            else:
                # Buyer gets the placement total back, sellers lose the recomputed share
                await self._accounts.adjust_balance(
                    db, order.user_id, order.total_amount, 0,
                    LedgerEntryType.REFUND_CREDIT, _REF_TYPE, order.id,
                    f"Refund for order {order.id}",
                )
                for seller_id, share in sorted(shares.items()):
                    await self._accounts.adjust_balance(
                        db, seller_id, 0, -share,
                        LedgerEntryType.REFUND_PENDING_DEBIT, _REF_TYPE, order.id,
                        f"Pending earnings reversed for refunded order {order.id}",
                    )

            await self._orders.set_status(db, order.id, target.value)
            order.status = target.value
            return order

        order = await self._run(db, f"set_payout_status({target_status})", work)
        logger.info("Order %s %s by admin %s", order.id, order.status, actor_id)
        return order

    async def _payout_prices(self, db: AsyncSession, order: Order) -> dict[str, int] | None:
        """Per-product prices used for payout shares; None means the line snapshot."""
        if self._price_source == "snapshot":
            return None
        product_ids = sorted({item.product_id for item in order.items})
        products = await self._catalog.lock_products(db, product_ids)
        for product_id in product_ids:
            if product_id not in products:
                logger.warning(
                    "Product %s of order %s no longer exists; using snapshot price",
                    product_id, order.id,
                )
        return {product_id: p.price for product_id, p in products.items()}

    # ------------------------------------------------------------------
    # UpdateStatus / CancelOrder
    # ------------------------------------------------------------------

    async def update_status(
        self,
        db: AsyncSession,
        order_id: str,
        new_status: str,
        actor_id: str,
        actor_role: str,
    ) -> Order:
        async def work() -> Order:
            order = await self._orders.get_for_update(db, order_id)
            if order is None:
                raise OrderNotFoundError(order_id)
            action = STATUS_ACTIONS.get(new_status)
            if action is None:
                raise InvalidStatusTransitionError(order.status, new_status)
            if actor_role == UserRole.BUYER.value and order.user_id != actor_id:
                raise ForbiddenError("Buyers can only change their own orders")
            if actor_role == UserRole.SELLER.value and not order.involves_seller(actor_id):
                raise ForbiddenError("Order contains none of your products")
            target = resolve_transition(order.id, order.status, action, actor_role)

            if target is OrderStatus.CANCELLED:
                await self._reverse_placement(db, order)
            await self._orders.set_status(db, order.id, target.value)
            order.status = target.value
            return order

        order = await self._run(db, f"update_status({new_status})", work)
        logger.info("Order %s -> %s by %s %s", order.id, order.status, actor_role, actor_id)
        return order

    async def cancel_order(
        self, db: AsyncSession, order_id: str, actor_id: str, actor_role: str
    ) -> Order:
        return await self.update_status(
            db, order_id, OrderStatus.CANCELLED.value, actor_id, actor_role
        )

    async def _reverse_placement(self, db: AsyncSession, order: Order) -> None:
        """Undo a placement: restock, refund the buyer, reverse seller pending credits."""
        product_ids = sorted({item.product_id for item in order.items})
        await self._catalog.lock_products(db, product_ids)
        for item in order.items:
            restocked = await self._catalog.increment_stock(db, item.product_id, item.quantity)
            if restocked is None:
                logger.warning(
                    "Product %s of cancelled order %s no longer exists; not restocked",
                    item.product_id, order.id,
                )

        shares = aggregate_seller_shares(order.items)
        participants = {order.user_id, *shares}
        accounts = await self._accounts.lock_accounts(db, sorted(participants))
        _require_accounts(accounts, participants)
        await self._accounts.adjust_balance(
            db, order.user_id, order.total_amount, 0,
            LedgerEntryType.CANCEL_REFUND, _REF_TYPE, order.id,
            f"Refund for cancelled order {order.id}",
        )
        for seller_id, share in sorted(shares.items()):
            await self._accounts.adjust_balance(
                db, seller_id, 0, -share,
                LedgerEntryType.CANCEL_PENDING_DEBIT, _REF_TYPE, order.id,
                f"Pending earnings reversed for cancelled order {order.id}",
            )
