"""Insert-if-absent helpers backed by storage uniqueness constraints.

Every "award once" path (badges, NFT tiers, attendance, shares, referrals,
donations) goes through ``insert_ignore`` so two concurrent requests can
never both create the row: the unique constraint decides, not a prior
SELECT.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


def dialect_insert(db: AsyncSession, model: type) -> Any:  # noqa: ANN401
    """Return a dialect-specific INSERT construct supporting ON CONFLICT."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(model)
    if dialect == "sqlite":
        return sqlite_insert(model)
    msg = f"Unsupported dialect for ON CONFLICT inserts: {dialect}"
    raise RuntimeError(msg)


async def insert_ignore(
    db: AsyncSession,
    model: type,
    values: dict[str, Any],
    conflict_columns: list[str],
) -> Any | None:  # noqa: ANN401
    """INSERT ... ON CONFLICT DO NOTHING RETURNING <primary key>.

    Returns the new row's primary key, or None if a row with the same
    ``conflict_columns`` already existed.
    """
    stmt = (
        dialect_insert(db, model)
        .values(**values)
        .on_conflict_do_nothing(index_elements=conflict_columns)
        .returning(inspect(model).primary_key[0])
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()
