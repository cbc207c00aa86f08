"""
ExportDesk Backend: Calendar Day Helpers
========================================

What:  Turns a calendar date into the timestamp range a "rate for date"
       lookup matches, and normalizes client timestamps before storage.
How:   A day is [00:00:00.000, 23:59:59.999] in the server's local time zone.
       Both bounds, and every stored timestamp, are converted to UTC so the
       comparison is the same on PostgreSQL (timestamptz) and SQLite (text).
"""

from datetime import date, datetime, time, timezone
from typing import Optional, Tuple

END_OF_DAY = time(23, 59, 59, 999000)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """
    Return the UTC start and end of a local calendar day.

    Example (server in UTC+2):
        day_bounds(date(2024, 1, 15))
        → (2024-01-14 22:00:00+00:00, 2024-01-15 21:59:59.999000+00:00)
    """
    start = datetime.combine(day, time.min).astimezone(timezone.utc)
    end = datetime.combine(day, END_OF_DAY).astimezone(timezone.utc)
    return start, end


def to_utc(value: Optional[datetime]) -> datetime:
    """Normalize a client timestamp to UTC; naive values are local time, None is now."""
    if value is None:
        return datetime.now(timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
