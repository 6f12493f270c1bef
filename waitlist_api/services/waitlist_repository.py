"""Persistence layer for waitlist entries.

All writes go through ``insert_entry``, which relies on the unique index on
``email_hash`` rather than a prior read to guarantee one row per email.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from waitlist_api.errors import ConflictError, StorageError
from waitlist_api.models.waitlist_entry import WaitlistEntry

logger = logging.getLogger(__name__)


# Label used for NULL/empty values in each aggregatable column
AGGREGATE_FIELDS = {
    "primary_game": "Not specified",
    "referrer": "direct",
}


def insert_entry(db: Session, entry: WaitlistEntry) -> str:
    """
    Persist a new waitlist entry.

    Args:
        db: Database session
        entry: Unsaved entry with ``email_hash`` set

    Returns:
        The new entry's id

    Raises:
        ConflictError: Another row already holds this email hash
        StorageError: Any other database failure
    """
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(
            "Duplicate signup rejected by unique index",
            extra={"event": "waitlist.duplicate", "email_hash": entry.email_hash[:8]},
        )
        raise ConflictError()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to insert waitlist entry: {e}", exc_info=True)
        raise StorageError()

    db.refresh(entry)
    return entry.id


def find_by_email_hash(db: Session, email_hash: str) -> Optional[WaitlistEntry]:
    """Return the entry holding ``email_hash``, if any."""
    try:
        return db.execute(
            select(WaitlistEntry).where(WaitlistEntry.email_hash == email_hash)
        ).scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Duplicate lookup failed: {e}", exc_info=True)
        raise StorageError()


def count_entries(db: Session) -> int:
    """Total number of signups."""
    try:
        return db.execute(select(func.count(WaitlistEntry.id))).scalar_one()
    except SQLAlchemyError as e:
        logger.error(f"Count query failed: {e}", exc_info=True)
        raise StorageError()


def count_since(db: Session, since: datetime) -> int:
    """Number of signups created at or after ``since`` (naive UTC)."""
    try:
        return db.execute(
            select(func.count(WaitlistEntry.id)).where(WaitlistEntry.created_at >= since)
        ).scalar_one()
    except SQLAlchemyError as e:
        logger.error(f"Count-since query failed: {e}", exc_info=True)
        raise StorageError()


def aggregate_by(db: Session, field: str) -> dict[str, int]:
    """
    Count signups grouped by a categorical column.

    NULL and empty values are reported under the column's sentinel label
    ("Not specified" for primary_game, "direct" for referrer).

    Args:
        db: Database session
        field: One of AGGREGATE_FIELDS

    Returns:
        Mapping of value to signup count

    Raises:
        ValueError: ``field`` is not aggregatable
    """
    if field not in AGGREGATE_FIELDS:
        raise ValueError(f"Cannot aggregate by {field!r}")

    column = getattr(WaitlistEntry, field)
    sentinel = AGGREGATE_FIELDS[field]
    try:
        rows = db.execute(
            select(column, func.count(WaitlistEntry.id)).group_by(column)
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Aggregation by {field} failed: {e}", exc_info=True)
        raise StorageError()

    breakdown: dict[str, int] = {}
    for value, count in rows:
        label = value or sentinel
        breakdown[label] = breakdown.get(label, 0) + count
    return breakdown


def signups_per_day(db: Session) -> list[tuple[str, int]]:
    """
    Signups per UTC calendar day, oldest first.

    Returns:
        List of (``YYYY-MM-DD``, count) tuples
    """
    day = func.date(WaitlistEntry.created_at)
    try:
        rows = db.execute(
            select(day.label("day"), func.count(WaitlistEntry.id))
            .group_by(day)
            .order_by(day)
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"Signups-per-day query failed: {e}", exc_info=True)
        raise StorageError()

    # SQLite returns strings, PostgreSQL returns date objects
    return [(str(d), count) for d, count in rows]


def export_entries(db: Session) -> list[WaitlistEntry]:
    """All entries, newest first."""
    try:
        return list(
            db.execute(
                select(WaitlistEntry).order_by(WaitlistEntry.created_at.desc())
            ).scalars()
        )
    except SQLAlchemyError as e:
        logger.error(f"Export query failed: {e}", exc_info=True)
        raise StorageError()


def ping(db: Session) -> None:
    """Round-trip to the database. Raises StorageError when unreachable."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        raise StorageError()
