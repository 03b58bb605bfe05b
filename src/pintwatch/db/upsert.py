"""Atomic insert-if-absent for rows keyed by a primary key or unique constraint."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def insert_or_lock(
    db: Session,
    model: type[Any],
    key: Mapping[str, Any],
    values: Mapping[str, Any] | None = None,
) -> tuple[Any, bool]:
    """Insert a row for ``key`` unless one exists, then return it locked.

    The insert is a single ``INSERT ... ON CONFLICT DO NOTHING``, so two
    writers racing on the same key never both insert: the loser waits for
    the winner's row and gets ``created=False`` back, then overwrites it.

    Args:
        db: Session owning the transaction; nothing is committed here.
        model: Mapped class whose primary key or unique constraint is ``key``.
        key: Column values identifying the row.
        values: Remaining column values used only when the row is inserted.

    Returns:
        ``(row, created)`` with the row loaded fresh and locked for update
        where the database supports row locks.
    """
    dialect = db.get_bind().dialect.name
    try:
        insert = _DIALECT_INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"Unsupported database dialect for upserts: {dialect}") from None

    db.flush()
    stmt = (
        insert(model)
        .values(**key, **(values or {}))
        .on_conflict_do_nothing(index_elements=list(key))
    )
    created = db.execute(stmt).rowcount == 1

    row = db.execute(
        select(model)
        .filter_by(**key)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one()
    return row, created
