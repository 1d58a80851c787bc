"""Calendar primitives used by the recurrence engine.

Weekday indices follow the board's convention: 0 = Sunday ... 6 = Saturday.
All helpers work on plain ``date`` values, no time of day is involved.
"""
from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

SUNDAY = 0
SATURDAY = 6

QUARTER_START_MONTHS = (1, 4, 7, 10)


def day_of_week(day: date) -> int:
    return (day.weekday() + 1) % 7


def is_weekend(day: date) -> bool:
    return day_of_week(day) in (SUNDAY, SATURDAY)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_days(base: date, days: int) -> date:
    return base + timedelta(days=days)


def add_weeks(base: date, weeks: int) -> date:
    return base + timedelta(weeks=weeks)


def add_months(base: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    year = base.year + (base.month - 1 + months) // 12
    month = (base.month - 1 + months) % 12 + 1
    day = min(base.day, days_in_month(year, month))
    return date(year, month, day)


def add_years(base: date, years: int) -> date:
    return add_months(base, years * 12)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def start_of_quarter(day: date) -> date:
    month = (day.month - 1) // 3 * 3 + 1
    return date(day.year, month, 1)


def start_of_year(day: date) -> date:
    return date(day.year, 1, 1)


def start_of_week(day: date) -> date:
    return day - timedelta(days=day_of_week(day))


def set_weekday(day: date, weekday: int) -> date:
    """Return ``weekday`` inside the Sunday-started week containing ``day``."""
    return day + timedelta(days=weekday - day_of_week(day))


def roll_date(year: int, month: int, day: int) -> date:
    # Overflowing days spill into the following month(s) instead of failing.
    return date(year, month, 1) + timedelta(days=day - 1)


def is_quarter_start_month(day: date) -> bool:
    return day.month in QUARTER_START_MONTHS


def parse_iso(value: str) -> date:
    return date.fromisoformat(value.strip()[:10])


def format_iso(day: date) -> str:
    return day.isoformat()


def to_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso(value)
