"""Recruiter referral codes and sign-up attribution.

Each recruiter is issued a stored, unique referral code the first time a
referral link is generated. Users who register through a link record the
recruiter in referred_by.

Revision ID: 002_recruiter_referral_codes
Revises: 001_engagement_tables
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "002_recruiter_referral_codes"
down_revision: str | None = "001_engagement_tables"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute("""
        ALTER TABLE users
        ADD COLUMN IF NOT EXISTS referral_code VARCHAR(32),
        ADD COLUMN IF NOT EXISTS referred_by VARCHAR(36) REFERENCES users(id) ON DELETE SET NULL
    """)
    op.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS users_referral_code_key
        ON users(referral_code)
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_users_referred_by
        ON users(referred_by)
        WHERE referred_by IS NOT NULL
    """)


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS idx_users_referred_by")
    op.execute("DROP INDEX IF EXISTS users_referral_code_key")
    op.execute("""
        ALTER TABLE users
        DROP COLUMN IF EXISTS referred_by,
        DROP COLUMN IF EXISTS referral_code
    """)
