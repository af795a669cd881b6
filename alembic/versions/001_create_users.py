"""001: create users table and the shared updated_at trigger function

Revision ID: 001
Revises: 
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE users (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            name            VARCHAR(128)    NOT NULL,
            email           VARCHAR(255)    NOT NULL,
            password_hash   VARCHAR(255)    NOT NULL,
            role            VARCHAR(10)     NOT NULL DEFAULT 'buyer',
            phone           VARCHAR(32),
            country         VARCHAR(64),
            state           VARCHAR(64),
            city            VARCHAR(64),
            address1        VARCHAR(255),
            address2        VARCHAR(255)    NOT NULL DEFAULT '',
            company_name    VARCHAR(255)    NOT NULL DEFAULT '',
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_email   UNIQUE (email),
            CONSTRAINT ck_users_role    CHECK (role IN ('admin', 'seller', 'buyer')),
            CONSTRAINT ck_users_address CHECK (
                role = 'admin' OR (
                    phone IS NOT NULL AND country IS NOT NULL AND state IS NOT NULL
                    AND city IS NOT NULL AND address1 IS NOT NULL
                )
            )
        );
    """)
    op.execute("CREATE INDEX idx_users_role ON users (role);")
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE users IS 'Marketplace users: buyers, sellers, admins';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
