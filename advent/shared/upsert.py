"""
Atomic upsert utilities using ON CONFLICT

Replaces the unsafe check-then-insert pattern with a single
INSERT ... ON CONFLICT DO UPDATE statement. Works on PostgreSQL (production)
and SQLite (local development and tests), which share the same clause.

Usage:
    from advent.shared.upsert import atomic_upsert

    # Replace this unsafe pattern:
    existing = db.query(Model).filter_by(calendar_id=cid, day_number=3).first()
    if existing:
        existing.content = new_content
    else:
        db.add(Model(calendar_id=cid, day_number=3, content=new_content))
    db.commit()

    # With this atomic operation:
    atomic_upsert(db, Model, {'calendar_id': cid, 'day_number': 3}, {'content': new_content})
"""

from typing import Type, Any, Dict

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from advent.shared.database import Base


_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def atomic_upsert(
    db: Session,
    model: Type[Base],
    conflict_values: Dict[str, Any],
    update_data: Dict[str, Any],
    auto_update_timestamp: bool = True,
    timestamp_field: str = 'updated_at'
) -> None:
    """
    Perform an atomic upsert on a table with a (possibly composite) unique constraint.

    Args:
        db: SQLAlchemy database session
        model: SQLAlchemy model class (e.g., CalendarDay)
        conflict_values: Values of the unique columns (e.g., {'calendar_id': ..., 'day_number': 3})
        update_data: Dictionary of fields to set on insert and on conflict
        auto_update_timestamp: If True, set timestamp_field to NOW() on conflict
        timestamp_field: Name of timestamp field to auto-update (default: 'updated_at')

    Example:
        atomic_upsert(
            db=db,
            model=CalendarDay,
            conflict_values={'calendar_id': calendar.id, 'day_number': 5},
            update_data={'title': 'Day 5', 'content': 'Hello', 'content_type': 'text'}
        )

    Raises:
        ValueError: If the model lacks a referenced field, or the dialect has no ON CONFLICT support
    """
    if not conflict_values:
        raise ValueError("conflict_values must name at least one unique column")

    for field in list(conflict_values) + list(update_data):
        if not hasattr(model, field):
            raise ValueError(f"Model {model.__name__} does not have field '{field}'")

    if auto_update_timestamp and not hasattr(model, timestamp_field):
        raise ValueError(f"Model {model.__name__} does not have field '{timestamp_field}'")

    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise ValueError(f"Atomic upsert is not supported for dialect '{dialect}'")

    stmt = insert(model).values(**conflict_values, **update_data)

    update_dict = dict(update_data)
    if auto_update_timestamp:
        update_dict[timestamp_field] = func.now()

    stmt = stmt.on_conflict_do_update(
        index_elements=list(conflict_values),
        set_=update_dict
    )

    db.execute(stmt)
