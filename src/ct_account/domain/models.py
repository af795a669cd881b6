"""Domain models for ct_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Account:
    id: str
    user_id: str
    balance: int           # cents, spendable
    pending_balance: int   # cents, seller earnings held until release
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_balance(self) -> int:
        return self.balance + self.pending_balance


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    user_id: str
    entry_type: str                  # LedgerEntryType value
    balance_delta: int               # cents, positive=income negative=expense
    pending_delta: int               # cents
    balance_after: int               # balance snapshot after op
    pending_after: int               # pending_balance snapshot after op
    reference_type: str | None = None
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None
