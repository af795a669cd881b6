"""Unit tests for AccountApplicationService using a mock repository."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.ct_account.application.service import AccountApplicationService
from src.ct_account.domain.models import Account, LedgerEntry
from src.ct_common.errors import AccountNotFoundError, InvalidCursorError
from src.ct_common.pagination import decode_cursor, encode_cursor


def _make_account(balance: int = 100000, pending: int = 0) -> Account:
    return Account(
        id="uuid-1",
        user_id="user-1",
        balance=balance,
        pending_balance=pending,
        version=1,
        created_at=datetime.now(UTC),
        updated_at=datetime.now(UTC),
    )


def _make_entry(entry_id: int = 1, delta: int = 10000, after: int = 110000) -> LedgerEntry:
    return LedgerEntry(
        id=entry_id,
        user_id="user-1",
        entry_type="DEPOSIT",
        balance_delta=delta,
        pending_delta=0,
        balance_after=after,
        pending_after=0,
        created_at=datetime.now(UTC),
    )


class TestGetBalance:
    async def test_returns_balance_and_pending(self) -> None:
        mock_repo = AsyncMock()
        mock_repo.get_account_by_user_id.return_value = _make_account(150000, 6500)
        svc = AccountApplicationService(repo=mock_repo)

        result = await svc.get_balance(MagicMock(), "user-1")

        assert result.available.cents == 150000
        assert result.pending.cents == 6500
        assert result.available.display == "$1,500.00"
        assert result.total.cents == 156500

    async def test_negative_pending_displayed(self) -> None:
        mock_repo = AsyncMock()
        mock_repo.get_account_by_user_id.return_value = _make_account(7000, -1000)
        svc = AccountApplicationService(repo=mock_repo)

        result = await svc.get_balance(MagicMock(), "user-1")

        assert result.pending.display == "-$10.00"

    async def test_missing_account(self) -> None:
        mock_repo = AsyncMock()
        mock_repo.get_account_by_user_id.return_value = None
        svc = AccountApplicationService(repo=mock_repo)

        with pytest.raises(AccountNotFoundError):
            await svc.get_balance(MagicMock(), "ghost")


class TestDeposit:
    async def test_commits_and_returns_new_balance(self) -> None:
        mock_repo = AsyncMock()
        mock_repo.deposit.return_value = (_make_account(110000), _make_entry(7))
        svc = AccountApplicationService(repo=mock_repo)
        db = AsyncMock()

        result = await svc.deposit(db, "user-1", 10000)

        assert result.balance.available.cents == 110000
        assert result.deposited.cents == 10000
        assert result.entry.id == 7
        db.commit.assert_awaited_once()

    async def test_rolls_back_on_failure(self) -> None:
        mock_repo = AsyncMock()
        mock_repo.deposit.side_effect = AccountNotFoundError("user-1")
        svc = AccountApplicationService(repo=mock_repo)
        db = AsyncMock()

        with pytest.raises(AccountNotFoundError):
            await svc.deposit(db, "user-1", 10000)
        db.rollback.assert_awaited_once()
        db.commit.assert_not_called()


class TestListLedger:
    async def test_has_more_and_next_cursor(self) -> None:
        mock_repo = AsyncMock()
        mock_repo.list_ledger_entries.return_value = [_make_entry(i) for i in (5, 4, 3)]
        svc = AccountApplicationService(repo=mock_repo)

        result = await svc.list_ledger(MagicMock(), "user-1", None, 2, None)

        assert [i.id for i in result.items] == [5, 4]
        assert result.has_more is True
        assert decode_cursor(result.next_cursor) == 4
        assert mock_repo.list_ledger_entries.call_args.args[3] == 3

    async def test_last_page(self) -> None:
        mock_repo = AsyncMock()
        mock_repo.list_ledger_entries.return_value = [_make_entry(1)]
        svc = AccountApplicationService(repo=mock_repo)

        result = await svc.list_ledger(MagicMock(), "user-1", encode_cursor(2), 20, "DEPOSIT")

        assert result.has_more is False
        assert result.next_cursor is None
        assert mock_repo.list_ledger_entries.call_args.args[2] == 2

    async def test_malformed_cursor_rejected_before_query(self) -> None:
        mock_repo = AsyncMock()
        svc = AccountApplicationService(repo=mock_repo)

        with pytest.raises(InvalidCursorError):
            await svc.list_ledger(MagicMock(), "user-1", "%%%", 20, None)
        mock_repo.list_ledger_entries.assert_not_called()
