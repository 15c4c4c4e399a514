"""001: create users table

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
    # IF NOT EXISTS: the app may already have created it at startup
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id      SERIAL          PRIMARY KEY,
            name    VARCHAR(255)    NOT NULL,
            email   VARCHAR(255)    NOT NULL
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'User records, source of truth for the users_list cache';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
