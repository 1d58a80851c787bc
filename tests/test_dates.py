from __future__ import annotations

from datetime import date, datetime

from command_board.domain.dates import (
    add_months,
    add_years,
    day_of_week,
    is_weekend,
    roll_date,
    set_weekday,
    start_of_quarter,
    start_of_week,
    to_date,
)


def test_day_of_week_starts_on_sunday() -> None:
    assert day_of_week(date(2026, 11, 1)) == 0
    assert day_of_week(date(2026, 10, 19)) == 1
    assert day_of_week(date(2026, 10, 31)) == 6


def test_weekend_detection() -> None:
    assert is_weekend(date(2026, 10, 31))
    assert is_weekend(date(2026, 11, 1))
    assert not is_weekend(date(2026, 10, 30))


def test_add_months_clamps_to_month_end() -> None:
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2026, 11, 30), 3) == date(2027, 2, 28)
    assert add_months(date(2026, 3, 15), -3) == date(2025, 12, 15)


def test_add_years_on_leap_day() -> None:
    assert add_years(date(2028, 2, 29), 1) == date(2029, 2, 28)


def test_roll_date_spills_into_next_month() -> None:
    assert roll_date(2026, 4, 31) == date(2026, 5, 1)
    assert roll_date(2026, 4, 30) == date(2026, 4, 30)


def test_week_helpers() -> None:
    monday = date(2026, 10, 19)
    assert start_of_week(monday) == date(2026, 10, 18)
    assert set_weekday(monday, 3) == date(2026, 10, 21)
    assert set_weekday(monday, 0) == date(2026, 10, 18)


def test_start_of_quarter() -> None:
    assert start_of_quarter(date(2026, 11, 20)) == date(2026, 10, 1)
    assert start_of_quarter(date(2026, 3, 31)) == date(2026, 1, 1)


def test_to_date_accepts_strings_and_datetimes() -> None:
    assert to_date("2026-10-19") == date(2026, 10, 19)
    assert to_date("2026-10-19T08:00:00") == date(2026, 10, 19)
    assert to_date(datetime(2026, 10, 19, 23, 59)) == date(2026, 10, 19)
