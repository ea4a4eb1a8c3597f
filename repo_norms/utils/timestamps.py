"""Timestamp utilities for UTC handling and report naming.

All timestamps produced here are timezone-aware UTC. Reports use:
- an ISO 8601 stamp for JSON exports and logs
- a calendar date (YYYY-MM-DD) in report file names
- a human-readable stamp in report headers
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Format a datetime as ISO 8601 string in UTC with a 'Z' suffix.

    Example:
        >>> format_timestamp(datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc))
        '2025-11-04T12:00:00Z'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_report_date(dt: Optional[datetime] = None) -> str:
    """Calendar date used in report file names (defaults to today, UTC).

    Example:
        >>> format_report_date(datetime(2025, 11, 4, 23, 30, tzinfo=timezone.utc))
        '2025-11-04'
    """
    dt_utc = ensure_utc(dt) if dt is not None else utc_now()
    return dt_utc.strftime("%Y-%m-%d")


def format_display_timestamp(dt: datetime) -> str:
    """Human-readable UTC timestamp for report headers.

    Example:
        >>> format_display_timestamp(datetime(2025, 11, 4, 12, 5, tzinfo=timezone.utc))
        '2025-11-04 12:05 UTC'
    """
    dt_utc = ensure_utc(dt)
    if dt_utc is None:
        return ""
    return dt_utc.strftime("%Y-%m-%d %H:%M UTC")
