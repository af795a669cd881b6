"""Account reads and the simulated top-up.

Order-driven balance moves never pass through this service: they run inside
the settlement engine's transaction against the repository directly.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.application.schemas import (
    BalanceResponse,
    DepositResponse,
    LedgerEntryItem,
    LedgerPage,
    Money,
)
from src.ct_account.domain.models import Account
from src.ct_account.domain.repository import AccountRepositoryProtocol
from src.ct_account.infrastructure.persistence import AccountRepository
from src.ct_common.errors import AccountNotFoundError
from src.ct_common.pagination import decode_cursor, encode_cursor, split_page

logger = logging.getLogger(__name__)


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def _require(self, db: AsyncSession, user_id: str) -> Account:
        account = await self._repo.get_account_by_user_id(db, user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
        return account

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        return BalanceResponse.from_account(await self._require(db, user_id))

    async def deposit(
        self, db: AsyncSession, user_id: str, amount_cents: int
    ) -> DepositResponse:
        try:
            account, entry = await self._repo.deposit(db, user_id, amount_cents)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Deposit of %d cents for user %s (entry %d)", amount_cents, user_id, entry.id)
        return DepositResponse(
            deposited=Money.of(amount_cents),
            balance=BalanceResponse.from_account(account),
            entry=LedgerEntryItem.from_domain(entry),
        )

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerPage:
        before_id = decode_cursor(cursor)
        rows = await self._repo.list_ledger_entries(db, user_id, before_id, limit + 1, entry_type)
        page, has_more = split_page(rows, limit)
        return LedgerPage(
            items=[LedgerEntryItem.from_domain(e) for e in page],
            next_cursor=encode_cursor(page[-1].id) if has_more else None,
            has_more=has_more,
        )
