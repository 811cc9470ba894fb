"""Date/time helpers.

All timestamps carried by domain events are timezone-aware UTC datetimes.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return a timezone-aware datetime in UTC."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise it to UTC."""
    if value.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return value.astimezone(UTC)
