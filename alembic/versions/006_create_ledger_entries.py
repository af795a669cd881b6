"""006: create ledger_entries table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE ledger_entries (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            entry_type      VARCHAR(30)     NOT NULL,
            balance_delta   BIGINT          NOT NULL,
            pending_delta   BIGINT          NOT NULL,
            balance_after   BIGINT          NOT NULL,
            pending_after   BIGINT          NOT NULL,
            reference_type  VARCHAR(30),
            reference_id    VARCHAR(64),
            description     VARCHAR(500),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_ledger_entry_type CHECK (
                entry_type IN (
                    'DEPOSIT',
                    'ORDER_PAYMENT', 'SALE_PENDING_CREDIT',
                    'PAYOUT_RELEASE',
                    'REFUND_CREDIT', 'REFUND_PENDING_DEBIT',
                    'CANCEL_REFUND', 'CANCEL_PENDING_DEBIT'
                )
            ),
            CONSTRAINT ck_ledger_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_ledger_user_time ON ledger_entries (user_id, created_at DESC);")
    op.execute("""
        CREATE INDEX idx_ledger_reference
        ON ledger_entries (reference_type, reference_id)
        WHERE reference_id IS NOT NULL;
    """)
    op.execute("CREATE INDEX idx_ledger_type ON ledger_entries (entry_type, created_at);")
    op.execute("COMMENT ON TABLE ledger_entries IS 'Append-only balance journal (cents)';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS ledger_entries CASCADE;")
