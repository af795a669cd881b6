"""Raw-SQL account repository.

Balance moves are a single guarded statement: the UPDATE only matches when
``balance + :balance_delta >= 0``, so an overdraw can never be written even
without a prior SELECT. ``pending_balance`` has no guard; a refund priced at
the current catalog price may drive it negative and /admin/invariants reports
that.

Every successful move appends exactly one ledger row carrying the post-move
balances. Commit/rollback belongs to the caller.
"""

from typing import Any, NoReturn

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.domain.models import Account, LedgerEntry
from src.ct_common.enums import LedgerEntryType
from src.ct_common.errors import AccountNotFoundError, InsufficientFundsError, InternalError

_ACCOUNT_COLUMNS = "id, user_id, balance, pending_balance, version, created_at, updated_at"
_LEDGER_COLUMNS = (
    "id, user_id, entry_type, balance_delta, pending_delta, balance_after, pending_after, "
    "reference_type, reference_id, description, created_at"
)

_SELECT_ONE = text(f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE user_id = :user_id")

_SELECT_FOR_UPDATE = text(
    f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE user_id IN :user_ids "
    "ORDER BY user_id FOR UPDATE"
).bindparams(bindparam("user_ids", expanding=True))

_APPLY_DELTA = text(f"""
    UPDATE accounts
       SET balance = balance + :balance_delta,
           pending_balance = pending_balance + :pending_delta,
           version = version + 1,
           updated_at = NOW()
     WHERE user_id = :user_id
       AND balance + :balance_delta >= 0
    RETURNING {_ACCOUNT_COLUMNS}
""")

_APPEND_LEDGER = text(f"""
    INSERT INTO ledger_entries (
        user_id, entry_type, balance_delta, pending_delta, balance_after, pending_after,
        reference_type, reference_id, description
    ) VALUES (
        :user_id, :entry_type, :balance_delta, :pending_delta, :balance_after, :pending_after,
        :reference_type, :reference_id, :description
    )
    RETURNING {_LEDGER_COLUMNS}
""")

# Keyset page: NULL cursor = newest entries, NULL entry_type = all types
_LEDGER_PAGE = text(f"""
    SELECT {_LEDGER_COLUMNS}
      FROM ledger_entries
     WHERE user_id = :user_id
       AND (CAST(:before_id AS BIGINT) IS NULL OR id < :before_id)
       AND (CAST(:entry_type AS TEXT) IS NULL OR entry_type = :entry_type)
     ORDER BY id DESC
     LIMIT :limit
""")

_SUM_FUNDS = text("SELECT COALESCE(SUM(balance + pending_balance), 0) FROM accounts")

_SUM_DEPOSITS = text(
    "SELECT COALESCE(SUM(balance_delta), 0) FROM ledger_entries WHERE entry_type = :entry_type"
)


def _account(row: Any) -> Account:
    return Account(
        id=str(row.id),
        user_id=row.user_id,
        balance=row.balance,
        pending_balance=row.pending_balance,
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _ledger_entry(row: Any) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,
        user_id=row.user_id,
        entry_type=row.entry_type,
        balance_delta=row.balance_delta,
        pending_delta=row.pending_delta,
        balance_after=row.balance_after,
        pending_after=row.pending_after,
        reference_type=row.reference_type,
        reference_id=row.reference_id,
        description=row.description,
        created_at=row.created_at,
    )


class AccountRepository:
    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None:
        row = (await db.execute(_SELECT_ONE, {"user_id": user_id})).fetchone()
        return _account(row) if row is not None else None

    async def lock_accounts(
        self, db: AsyncSession, user_ids: list[str]
    ) -> dict[str, Account]:
        """Row-lock the given accounts in user_id order; ids without an account are omitted."""
        if not user_ids:
            return {}
        result = await db.execute(_SELECT_FOR_UPDATE, {"user_ids": sorted(set(user_ids))})
        return {row.user_id: _account(row) for row in result.fetchall()}

    async def adjust_balance(
        self,
        db: AsyncSession,
        user_id: str,
        balance_delta: int,
        pending_delta: int,
        entry_type: str,
        ref_type: str | None,
        ref_id: str | None,
        description: str,
    ) -> tuple[Account, LedgerEntry]:
        kind = LedgerEntryType(entry_type)  # ValueError before anything is written
        row = (
            await db.execute(
                _APPLY_DELTA,
                {
                    "user_id": user_id,
                    "balance_delta": balance_delta,
                    "pending_delta": pending_delta,
                },
            )
        ).fetchone()
        if row is None:
            await self._raise_rejected(db, user_id, balance_delta)
        account = _account(row)

        entry_row = (
            await db.execute(
                _APPEND_LEDGER,
                {
                    "user_id": user_id,
                    "entry_type": kind.value,
                    "balance_delta": balance_delta,
                    "pending_delta": pending_delta,
                    "balance_after": account.balance,
                    "pending_after": account.pending_balance,
                    "reference_type": ref_type,
                    "reference_id": ref_id,
                    "description": description,
                },
            )
        ).fetchone()
        if entry_row is None:
            raise InternalError(f"Ledger insert for {user_id} returned no row")
        return account, _ledger_entry(entry_row)

    async def _raise_rejected(self, db: AsyncSession, user_id: str, balance_delta: int) -> NoReturn:
        """The guarded UPDATE matched nothing: tell a missing account from an overdraw."""
        current = await self.get_account_by_user_id(db, user_id)
        if current is None:
            raise AccountNotFoundError(user_id)
        raise InsufficientFundsError(-balance_delta, current.balance)

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]:
        return await self.adjust_balance(
            db,
            user_id,
            balance_delta=amount,
            pending_delta=0,
            entry_type=LedgerEntryType.DEPOSIT.value,
            ref_type="DEPOSIT",
            ref_id=None,
            description="Simulated deposit",
        )

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        params = {
            "user_id": user_id,
            "before_id": cursor_id,
            "entry_type": entry_type,
            "limit": limit,
        }
        return [_ledger_entry(row) for row in (await db.execute(_LEDGER_PAGE, params)).fetchall()]

    async def total_funds(self, db: AsyncSession) -> int:
        """Sum of available + pending over every account."""
        return int((await db.execute(_SUM_FUNDS)).scalar_one())

    async def total_deposits(self, db: AsyncSession) -> int:
        params = {"entry_type": LedgerEntryType.DEPOSIT.value}
        return int((await db.execute(_SUM_DEPOSITS, params)).scalar_one())
