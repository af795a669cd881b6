"""Unit tests for AdminService (mocked DB and repositories)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.ct_admin.application.service import AdminService
from src.ct_common.errors import ProductNotFoundError


def _rows(rows: list[object]) -> MagicMock:
    result = MagicMock()
    result.fetchall.return_value = rows
    return result


@pytest.fixture
def accounts() -> AsyncMock:
    accounts = AsyncMock()
    accounts.total_funds.return_value = 20000
    accounts.total_deposits.return_value = 20000
    return accounts


@pytest.fixture
def catalog() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


class TestStats:
    async def test_counts_revenue_and_top_products(self, accounts, catalog, db) -> None:
        counts = MagicMock()
        counts.fetchone.return_value = SimpleNamespace(user_count=4, admin_count=1)
        revenue = MagicMock()
        revenue.scalar_one.return_value = 7000
        top = _rows([
            SimpleNamespace(product_id="p-s", name="Desk lamp", category="Lighting", quantity=2)
        ])
        db.execute = AsyncMock(side_effect=[counts, revenue, top])

        stats = await AdminService(accounts, catalog).get_stats(db)

        assert stats["total_users"] == 4
        assert stats["admin_count"] == 1
        assert stats["total_revenue_display"] == "$70.00"
        assert stats["top_products"][0]["quantity"] == 2


class TestDeleteProduct:
    async def test_missing(self, accounts, catalog, db) -> None:
        catalog.delete_product.return_value = False
        with pytest.raises(ProductNotFoundError):
            await AdminService(accounts, catalog).delete_product(db, "p-9")
        db.rollback.assert_awaited_once()

    async def test_deletes(self, accounts, catalog, db) -> None:
        catalog.delete_product.return_value = True
        await AdminService(accounts, catalog).delete_product(db, "p-1")
        db.commit.assert_awaited_once()


class TestVerifyInvariants:
    async def test_conserved(self, accounts, catalog, db) -> None:
        db.execute = AsyncMock(return_value=_rows([]))

        report = await AdminService(accounts, catalog).verify_invariants(db)

        assert report["ok"] is True
        assert report["violations"] == []

    async def test_funds_mismatch(self, accounts, catalog, db) -> None:
        accounts.total_funds.return_value = 19000
        db.execute = AsyncMock(return_value=_rows([]))

        report = await AdminService(accounts, catalog).verify_invariants(db)

        assert report["ok"] is False
        assert "difference -1000" in report["violations"][0]

    async def test_negative_pending_reported(self, accounts, catalog, db) -> None:
        db.execute = AsyncMock(
            return_value=_rows([SimpleNamespace(user_id="seller-s", pending_balance=-1000)])
        )

        report = await AdminService(accounts, catalog).verify_invariants(db)

        assert report["ok"] is False
        assert "seller-s" in report["violations"][0]
