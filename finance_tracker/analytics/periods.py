"""Calendar-month bucketing shared by every aggregator.

Month keys are ``YYYY-MM`` strings with a zero-padded month, so plain string
comparison orders them chronologically.
"""

import calendar
from datetime import date
from typing import List, Optional, Tuple

_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

PERIODS = ("this-month", "last-month", "this-year")


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def parse_month_key(key: str) -> Tuple[int, int]:
    year_s, month_s = key.split("-")
    return int(year_s), int(month_s)


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Move ``offset`` months forward (or back, when negative) from year/month."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of the month."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def last_month_keys(months: int, today: Optional[date] = None) -> List[str]:
    """Keys of the last ``months`` months ending with the current one, oldest first."""
    today = today or date.today()
    keys = []
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        keys.append(f"{year:04d}-{month:02d}")
    return keys


def window_start(months: int, today: Optional[date] = None) -> date:
    """First day of the oldest month in a window of ``months`` months ending today."""
    today = today or date.today()
    year, month = shift_month(today.year, today.month, -(max(months, 1) - 1))
    return date(year, month, 1)


def month_label(key: str) -> str:
    """Short chart label, ``2026-03`` -> ``Mar 26``."""
    year, month = parse_month_key(key)
    return f"{_MONTH_ABBR[month - 1]} {year % 100:02d}"


def period_window(period: str, today: Optional[date] = None) -> Tuple[date, date]:
    """Date window for one of PERIODS; anything else is a ValueError."""
    if period not in PERIODS:
        raise ValueError(f"unknown period: {period!r}")
    today = today or date.today()
    if period == "last-month":
        year, month = shift_month(today.year, today.month, -1)
        return month_bounds(year, month)
    if period == "this-year":
        return date(today.year, 1, 1), date(today.year, 12, 31)
    return month_bounds(today.year, today.month)
