"""
Month arithmetic shared by the grid engine and the month window.

Weekdays here are Sunday-based: 0 = Sunday ... 6 = Saturday.
"""

import calendar
import re
from datetime import date


_DATE_KEY = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be in 1..12, got {month}")


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month, leap-year aware."""
    _check_month(month)
    return calendar.monthrange(year, month)[1]


def first_weekday(year: int, month: int) -> int:
    """Sunday-based weekday of the 1st of the month."""
    _check_month(month)
    return (date(year, month, 1).weekday() + 1) % 7


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """
    Move a (year, month) pair by a number of months.

    shift_month(2024, 1, -1) -> (2023, 12)
    """
    _check_month(month)
    ordinal = year * 12 + (month - 1) + delta
    return ordinal // 12, ordinal % 12 + 1


def date_key(year: int, month: int, day: int) -> str:
    """Event index key for a day, e.g. "2024-03-01"."""
    return f"{year:04d}-{month:02d}-{day:02d}"


def parse_date_key(key: str) -> date:
    """
    Parse a YYYY-MM-DD key.

    Raises:
        ValueError: If the key is not a real calendar date in that form
    """
    match = _DATE_KEY.fullmatch(key)
    if match is None:
        raise ValueError(f"Date must be YYYY-MM-DD, got {key!r}")
    year, month, day = (int(part) for part in match.groups())
    return date(year, month, day)


def is_valid_date_key(key: str) -> bool:
    try:
        parse_date_key(key)
    except ValueError:
        return False
    return True
