"""
Time-related utilities for the application.

All timestamps are generated in UTC. Upload timestamps are stored as
timezone-aware datetimes so MongoDB sorts them chronologically, and
rendered as ISO-8601 strings in API responses.
"""

from datetime import datetime, timezone

from core.utils.constants import DATE_FORMAT


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision; BSON dates keep milliseconds only."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime, to the millisecond."""
    return truncate_to_millis(datetime.now(timezone.utc))


def utc_now_iso() -> str:
    """Return current UTC time in ISO-8601 format.

    Example:
        2024-01-15T10:42:31.123000+00:00
    """
    return utc_now().isoformat()


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (MongoDB returns naive UTC by default)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_calendar_date(value: datetime) -> str:
    """Render a datetime as a UTC calendar date, e.g. 2024-01-15."""
    return ensure_utc(value).strftime(DATE_FORMAT)


def utc_today() -> str:
    """Return today's UTC calendar date."""
    return format_calendar_date(utc_now())
