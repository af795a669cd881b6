"""Request/response models for the account API.

Every amount is exposed twice: exact integer cents for machines and a
formatted string for people. Clients must only ever do arithmetic on cents.
"""

from pydantic import BaseModel, Field

from src.ct_account.domain.models import Account, LedgerEntry
from src.ct_common.cents import cents_to_display
from src.ct_common.datetime_utils import isoformat_or_none


class Money(BaseModel):
    cents: int
    display: str

    @classmethod
    def of(cls, cents: int) -> "Money":
        return cls(cents=cents, display=cents_to_display(cents))


class DepositRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Simulated top-up amount in cents")


class BalanceResponse(BaseModel):
    user_id: str
    available: Money
    pending: Money  # may be negative after a price-drift refund
    total: Money

    @classmethod
    def from_account(cls, account: Account) -> "BalanceResponse":
        return cls(
            user_id=account.user_id,
            available=Money.of(account.balance),
            pending=Money.of(account.pending_balance),
            total=Money.of(account.total_balance),
        )


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    balance_delta_cents: int
    pending_delta_cents: int
    balance_after_cents: int
    pending_after_cents: int
    reference_type: str | None
    reference_id: str | None
    description: str | None
    created_at: str | None

    @classmethod
    def from_domain(cls, e: LedgerEntry) -> "LedgerEntryItem":
        return cls(
            id=e.id,
            entry_type=e.entry_type,
            balance_delta_cents=e.balance_delta,
            pending_delta_cents=e.pending_delta,
            balance_after_cents=e.balance_after,
            pending_after_cents=e.pending_after,
            reference_type=e.reference_type,
            reference_id=e.reference_id,
            description=e.description,
            created_at=isoformat_or_none(e.created_at),
        )


class DepositResponse(BaseModel):
    deposited: Money
    balance: BalanceResponse
    entry: LedgerEntryItem


class LedgerPage(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool
