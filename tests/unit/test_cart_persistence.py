"""Unit tests for CartRepository using MagicMock AsyncSession."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from src.ct_cart.infrastructure.persistence import CartRepository


def _rows(*lines: tuple[str, int]) -> MagicMock:
    result = MagicMock()
    result.fetchall.return_value = [
        SimpleNamespace(user_id="u-1", product_id=p, quantity=q, created_at=datetime.now(UTC))
        for p, q in lines
    ]
    return result


class TestGetItemsForUpdate:
    async def test_locks_the_buyers_rows(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(return_value=_rows(("p-1", 2), ("p-2", 1)))

        items = await CartRepository().get_items_for_update(db, "u-1")

        assert [(i.product_id, i.quantity) for i in items] == [("p-1", 2), ("p-2", 1)]
        sql, params = db.execute.call_args.args
        assert "FOR UPDATE" in str(sql)
        assert params == {"user_id": "u-1"}

    async def test_empty_cart(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(return_value=_rows())

        assert await CartRepository().get_items_for_update(db, "u-1") == []
