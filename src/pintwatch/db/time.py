"""Time utilities for database models and the HTTP clock boundary."""

from datetime import UTC, datetime
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Normalise a datetime to aware UTC; naive values are assumed to be UTC.

    SQLite drops tzinfo on round trips, so comparisons against stored
    timestamps go through this helper.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def local_now(tz_name: str) -> datetime:
    """Return the current wall-clock time in ``tz_name``."""
    return datetime.now(ZoneInfo(tz_name))
