"""Unit-test fixtures: in-memory repositories for settlement tests.

All fakes share one MarketStore. FakeSession.commit() snapshots the store and
FakeSession.rollback() restores the last snapshot, so a failed operation can
be checked for leaving no trace exactly as a database transaction would.
"""

import asyncio
import copy
from collections.abc import Callable
from typing import Any

import pytest

from src.ct_account.domain.models import Account, LedgerEntry
from src.ct_cart.domain.models import CartItem
from src.ct_catalog.domain.models import Product
from src.ct_common.enums import LedgerEntryType
from src.ct_common.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InsufficientStockError,
    ProductNotFoundError,
)
from src.ct_order.domain.models import Order
from src.ct_settlement.application.engine import SettlementEngine


class MarketStore:
    def __init__(self) -> None:
        self.accounts: dict[str, Account] = {}
        self.products: dict[str, Product] = {}
        self.carts: dict[str, dict[str, int]] = {}
        self.orders: dict[str, Order] = {}
        self.ledger: list[LedgerEntry] = []
        self.lock_log: list[tuple[str, list[str]]] = []
        self._committed = self._snapshot()

    # -- seeding -----------------------------------------------------------

    def add_account(self, user_id: str, balance: int = 0, pending: int = 0) -> None:
        self.accounts[user_id] = Account(
            id=f"acc-{user_id}", user_id=user_id, balance=balance,
            pending_balance=pending, version=0,
        )

    def add_product(
        self, product_id: str, seller_id: str, name: str, price: int, stock: int
    ) -> None:
        self.products[product_id] = Product(
            id=product_id, seller_id=seller_id, name=name, price=price, stock=stock
        )

    def add_to_cart(self, user_id: str, product_id: str, quantity: int) -> None:
        self.carts.setdefault(user_id, {})[product_id] = quantity

    # -- transaction emulation ---------------------------------------------

    def _snapshot(self) -> Any:
        return copy.deepcopy(
            (self.accounts, self.products, self.carts, self.orders, self.ledger)
        )

    def commit(self) -> None:
        self._committed = self._snapshot()

    def rollback(self) -> None:
        (
            self.accounts, self.products, self.carts, self.orders, self.ledger
        ) = copy.deepcopy(self._committed)

    # -- helpers for assertions --------------------------------------------

    def balance(self, user_id: str) -> int:
        return self.accounts[user_id].balance

    def pending(self, user_id: str) -> int:
        return self.accounts[user_id].pending_balance

    def stock(self, product_id: str) -> int:
        return self.products[product_id].stock

    def total_funds(self) -> int:
        return sum(a.balance + a.pending_balance for a in self.accounts.values())


class FakeSession:
    def __init__(self, store: MarketStore) -> None:
        self.store = store
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1
        self.store.commit()

    async def rollback(self) -> None:
        self.rollbacks += 1
        self.store.rollback()


class FakeAccountRepository:
    def __init__(self, store: MarketStore) -> None:
        self._store = store

    async def get_account_by_user_id(self, db: Any, user_id: str) -> Account | None:
        return self._store.accounts.get(user_id)

    async def lock_accounts(self, db: Any, user_ids: list[str]) -> dict[str, Account]:
        self._store.lock_log.append(("accounts", list(user_ids)))
        return {u: self._store.accounts[u] for u in user_ids if u in self._store.accounts}

    async def adjust_balance(
        self,
        db: Any,
        user_id: str,
        balance_delta: int,
        pending_delta: int,
        entry_type: str,
        ref_type: str | None,
        ref_id: str | None,
        description: str,
    ) -> tuple[Account, LedgerEntry]:
        account = self._store.accounts.get(user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
        if account.balance + balance_delta < 0:
            raise InsufficientFundsError(-balance_delta, account.balance)
        account.balance += balance_delta
        account.pending_balance += pending_delta
        account.version += 1
        entry = LedgerEntry(
            id=len(self._store.ledger) + 1,
            user_id=user_id,
            entry_type=LedgerEntryType(entry_type).value,
            balance_delta=balance_delta,
            pending_delta=pending_delta,
            balance_after=account.balance,
            pending_after=account.pending_balance,
            reference_type=ref_type,
            reference_id=ref_id,
            description=description,
        )
        self._store.ledger.append(entry)
        return account, entry

    async def deposit(self, db: Any, user_id: str, amount: int) -> tuple[Account, LedgerEntry]:
        return await self.adjust_balance(
            db, user_id, amount, 0, LedgerEntryType.DEPOSIT, None, None, "Deposit"
        )

    async def total_funds(self, db: Any) -> int:
        return self._store.total_funds()

    async def total_deposits(self, db: Any) -> int:
        return sum(
            e.balance_delta for e in self._store.ledger if e.entry_type == "DEPOSIT"
        )


class FakeCatalogRepository:
    def __init__(self, store: MarketStore) -> None:
        self._store = store

    async def get_product(self, db: Any, product_id: str) -> Product | None:
        return self._store.products.get(product_id)

    async def lock_products(self, db: Any, product_ids: list[str]) -> dict[str, Product]:
        ids = sorted(set(product_ids))
        self._store.lock_log.append(("products", ids))
        return {p: self._store.products[p] for p in ids if p in self._store.products}

    async def decrement_stock(self, db: Any, product_id: str, quantity: int) -> Product:
        product = self._store.products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if product.stock < quantity:
            raise InsufficientStockError(product.name, quantity, product.stock)
        product.stock -= quantity
        return product

    async def increment_stock(self, db: Any, product_id: str, quantity: int) -> Product | None:
        product = self._store.products.get(product_id)
        if product is None:
            return None
        product.stock += quantity
        return product


class FakeOrderRepository:
    def __init__(self, store: MarketStore) -> None:
        self._store = store

    async def save(self, db: Any, order: Order) -> None:
        self._store.orders[order.id] = copy.deepcopy(order)

    async def get_by_id(self, db: Any, order_id: str) -> Order | None:
        order = self._store.orders.get(order_id)
        return copy.deepcopy(order) if order else None

    async def get_for_update(self, db: Any, order_id: str) -> Order | None:
        self._store.lock_log.append(("orders", [order_id]))
        return await self.get_by_id(db, order_id)

    async def set_status(self, db: Any, order_id: str, status: str) -> None:
        self._store.orders[order_id].status = status


class FakeCartRepository:
    def __init__(self, store: MarketStore, delay: float = 0.0) -> None:
        self._store = store
        self._delay = delay

    async def get_items(self, db: Any, user_id: str) -> list[CartItem]:
        return [
            CartItem(user_id=user_id, product_id=p, quantity=q)
            for p, q in self._store.carts.get(user_id, {}).items()
        ]

    async def get_items_for_update(self, db: Any, user_id: str) -> list[CartItem]:
        self._store.lock_log.append(("cart", [user_id]))
        if self._delay:
            await asyncio.sleep(self._delay)
        return await self.get_items(db, user_id)

    async def clear(self, db: Any, user_id: str) -> int:
        return len(self._store.carts.pop(user_id, {}))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

BUYER = "buyer-1"
SELLER_S = "seller-s"
SELLER_T = "seller-t"
ADMIN = "admin-1"


@pytest.fixture
def store() -> MarketStore:
    """Two sellers, one buyer with 10000 cents and a two-line cart.

    p-s: 3000 cents, stock 10, sold by seller-s (cart quantity 2)
    p-t: 1000 cents, stock 5, sold by seller-t (cart quantity 1)
    """
    s = MarketStore()
    s.add_account(BUYER, balance=10000)
    s.add_account(SELLER_S)
    s.add_account(SELLER_T)
    s.add_account(ADMIN)
    s.add_product("p-s", SELLER_S, "Desk lamp", 3000, 10)
    s.add_product("p-t", SELLER_T, "Light bulb", 1000, 5)
    s.add_to_cart(BUYER, "p-s", 2)
    s.add_to_cart(BUYER, "p-t", 1)
    s.commit()
    return s


@pytest.fixture
def session(store: MarketStore) -> FakeSession:
    return FakeSession(store)


@pytest.fixture
def make_engine(store: MarketStore) -> Callable[..., SettlementEngine]:
    def _make(
        price_source: str = "current",
        timeout_seconds: float = 5.0,
        cart_delay: float = 0.0,
    ) -> SettlementEngine:
        return SettlementEngine(
            accounts=FakeAccountRepository(store),
            catalog=FakeCatalogRepository(store),
            orders=FakeOrderRepository(store),
            carts=FakeCartRepository(store, delay=cart_delay),
            price_source=price_source,
            timeout_seconds=timeout_seconds,
        )

    return _make


@pytest.fixture
def engine(make_engine: Callable[..., SettlementEngine]) -> SettlementEngine:
    return make_engine()
