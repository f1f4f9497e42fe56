"""
Date and time utilities for CalcBZ.

Provides timezone-aware datetime helpers and calendar month arithmetic
used to date amortization schedules.
"""
import calendar
from datetime import datetime, timezone, date


def utcnow() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        datetime: Current datetime in UTC with tzinfo set to timezone.utc

    Note:
        Always use this function instead of datetime.now() to ensure
        timezone-aware timestamps across the application.
    """
    return datetime.now(timezone.utc)


def today_date() -> date:
    """Current UTC date."""
    return utcnow().date()


def parse_ISO_date(v) -> date:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str):
        try:
            return date.fromisoformat(v)
        except ValueError as e:
            raise ValueError(f"Input must be an ISO date string (YYYY-MM-DD). Error: {e}")
    raise TypeError(f"Input must be a str, date or datetime, got {type(v)}")


def add_months(d: date, months: int) -> date:
    """
    Shift a date by a number of calendar months.

    The day is clamped to the last day of the target month, so billing
    dates anchored on the 31st fall on the 30th/28th in shorter months.

    Example:
        >>> add_months(date(2025, 1, 31), 1)
        datetime.date(2025, 2, 28)
        >>> add_months(date(2025, 11, 15), 3)
        datetime.date(2026, 2, 15)
    """
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
