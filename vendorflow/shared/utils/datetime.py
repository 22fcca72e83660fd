"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume it's UTC and attach timezone
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_datetime(value: datetime | str | None) -> datetime | None:
    """Parse an ISO-8601 string (or pass through a datetime) into UTC-aware form.

    Remote backends return timestamps as strings; ``Z`` suffixes are accepted.
    """
    if value is None or isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def is_past(dt: datetime | None, now: datetime | None = None) -> bool:
    """Return True when dt is set and not after now (default: current UTC time)."""
    if dt is None:
        return False
    return ensure_utc(dt) <= (now or utc_now())
