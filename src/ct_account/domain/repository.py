"""Account repository Protocol.

The settlement engine uses lock_accounts and adjust_balance inside its own
transaction; the admin invariant report uses the two totals.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.domain.models import Account, LedgerEntry


class AccountRepositoryProtocol(Protocol):
    async def get_account_by_user_id(
        self, db: AsyncSession, user_id: str
    ) -> Account | None: ...

    async def lock_accounts(
        self, db: AsyncSession, user_ids: list[str]
    ) -> dict[str, Account]: ...

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
    ) -> tuple[Account, LedgerEntry]: ...

    async def deposit(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> tuple[Account, LedgerEntry]: ...

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]: ...

    async def total_funds(self, db: AsyncSession) -> int: ...

    async def total_deposits(self, db: AsyncSession) -> int: ...
