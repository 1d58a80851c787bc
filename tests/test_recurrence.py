from __future__ import annotations

from datetime import date, timedelta

import pytest

from command_board.domain.dates import day_of_week
from command_board.domain.entities import RecurrenceRule
from command_board.domain.enums import RecurrencePattern, RecurrenceScope
from command_board.domain.recurrence import (
    applies_to_date,
    initial_due_date,
    last_business_day,
    next_occurrence,
    next_occurrence_date,
    nth_weekday_in_month,
)


def _days(start: date, count: int):
    return (start + timedelta(days=offset) for offset in range(count))


@pytest.mark.parametrize("pattern", [RecurrencePattern.WEEKLY, RecurrencePattern.BIWEEKLY])
def test_weekly_applies_only_on_listed_weekdays(pattern) -> None:
    rule = RecurrenceRule(pattern=pattern, weekdays=(1, 3))
    for day in _days(date(2026, 10, 1), 60):
        assert applies_to_date(rule, day) == (day_of_week(day) in (1, 3))


def test_weekly_without_weekdays_applies_every_day() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.WEEKLY)
    assert all(applies_to_date(rule, day) for day in _days(date(2026, 10, 1), 14))


def test_monthly_without_day_never_applies() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.MONTHLY)
    assert not any(applies_to_date(rule, day) for day in _days(date(2026, 10, 1), 31))


def test_monthly_day_beyond_month_end_uses_last_business_day() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.MONTHLY, day_of_month=31)
    april = [day for day in _days(date(2026, 4, 1), 30) if applies_to_date(rule, day)]
    assert april == [date(2026, 4, 30)]

    # February 2026 ends on a Saturday.
    rule = RecurrenceRule(pattern=RecurrencePattern.MONTHLY, day_of_month=30)
    february = [day for day in _days(date(2026, 2, 1), 28) if applies_to_date(rule, day)]
    assert february == [date(2026, 2, 27)]


def test_quarterly_requires_quarter_start_month() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.QUARTERLY, day_of_month=1)
    assert applies_to_date(rule, date(2026, 4, 1))
    assert not applies_to_date(rule, date(2026, 5, 1))


def test_yearly_predicate_never_matches() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.YEARLY)
    assert not any(applies_to_date(rule, day) for day in _days(date(2026, 1, 1), 366))


def test_business_days_ignore_weekends() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.BUSINESS_DAYS, interval=3)
    assert applies_to_date(rule, date(2026, 10, 30))
    assert not applies_to_date(rule, date(2026, 10, 31))
    assert not applies_to_date(rule, date(2026, 11, 1))


def test_second_monday_of_month() -> None:
    rule = RecurrenceRule(
        pattern=RecurrencePattern.NTH_WEEKDAY,
        weekdays=(1,),
        nth_week=2,
        scope=RecurrenceScope.MONTH,
    )
    march = [day for day in _days(date(2026, 3, 1), 31) if applies_to_date(rule, day)]
    assert march == [date(2026, 3, 9)]
    october = [day for day in _days(date(2026, 10, 1), 31) if applies_to_date(rule, day)]
    assert october == [date(2026, 10, 12)]


def test_nth_weekday_respects_scope() -> None:
    rule = RecurrenceRule(
        pattern=RecurrencePattern.NTH_WEEKDAY,
        weekdays=(2,),
        nth_week=2,
        scope=RecurrenceScope.QUARTER,
    )
    assert applies_to_date(rule, date(2026, 4, 14))
    assert not applies_to_date(rule, date(2026, 5, 12))


def test_incomplete_nth_weekday_never_applies() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.NTH_WEEKDAY, nth_week=2)
    assert not applies_to_date(rule, date(2026, 10, 12))


def test_unknown_pattern_degrades_to_neutral_answers() -> None:
    rule = RecurrenceRule(pattern="fortnightly")
    assert not applies_to_date(rule, date(2026, 10, 19))
    assert next_occurrence(rule, "2026-10-19") is None


@pytest.mark.parametrize(
    ("start", "expected"),
    [
        (date(2026, 10, 19), date(2026, 10, 21)),
        (date(2026, 10, 21), date(2026, 10, 26)),
        (date(2026, 10, 24), date(2026, 10, 26)),
    ],
)
def test_weekly_next(start, expected) -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.WEEKLY, weekdays=(1, 3))
    assert next_occurrence_date(rule, start) == expected


def test_weekly_next_sunday_wraps_into_following_week() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.WEEKLY, weekdays=(0,))
    assert next_occurrence_date(rule, date(2026, 10, 31)) == date(2026, 11, 1)


def test_weekly_without_weekdays_adds_seven_days() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.WEEKLY)
    assert next_occurrence_date(rule, date(2026, 10, 19)) == date(2026, 10, 26)


def test_biweekly_is_weekly_next_plus_one_week() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.BIWEEKLY, weekdays=(1, 3))
    assert next_occurrence_date(rule, date(2026, 10, 19)) == date(2026, 10, 28)


@pytest.mark.parametrize("start", ["2026-01-20", "2026-01-10"])
def test_monthly_always_advances_a_full_month(start) -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.MONTHLY, day_of_month=15)
    assert next_occurrence(rule, start) == "2026-02-15"


def test_monthly_keeps_current_day_and_clamps() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.MONTHLY)
    assert next_occurrence(rule, "2026-01-31") == "2026-02-28"
    rule = RecurrenceRule(pattern=RecurrencePattern.MONTHLY, day_of_month=31)
    assert next_occurrence(rule, "2026-03-31") == "2026-04-30"


def test_quarterly_next() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.QUARTERLY, day_of_month=1)
    assert next_occurrence(rule, "2026-01-01") == "2026-04-01"
    assert next_occurrence(RecurrenceRule(pattern=RecurrencePattern.QUARTERLY), "2026-11-30") == "2027-02-28"


def test_quarterly_day_past_month_end_rolls_over() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.QUARTERLY, day_of_month=31)
    assert next_occurrence(rule, "2026-01-31") == "2026-05-01"


def test_yearly_next() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.YEARLY)
    assert next_occurrence(rule, "2026-03-05") == "2027-03-05"
    assert next_occurrence(rule, "2028-02-29") == "2029-02-28"


@pytest.mark.parametrize(
    ("interval", "start", "expected"),
    [
        (1, date(2026, 5, 29), date(2026, 6, 1)),
        (3, date(2026, 5, 29), date(2026, 6, 3)),
        (1, date(2026, 10, 21), date(2026, 10, 22)),
        (None, date(2026, 10, 31), date(2026, 11, 2)),
        (0, date(2026, 10, 30), date(2026, 11, 2)),
    ],
)
def test_business_days_next(interval, start, expected) -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.BUSINESS_DAYS, interval=interval)
    assert next_occurrence_date(rule, start) == expected


def test_second_monday_next_from_march() -> None:
    rule = RecurrenceRule(
        pattern=RecurrencePattern.NTH_WEEKDAY,
        weekdays=(1,),
        nth_week=2,
        scope=RecurrenceScope.MONTH,
    )
    for day in _days(date(2026, 3, 1), 31):
        assert next_occurrence_date(rule, day) == date(2026, 4, 13)


def test_nth_weekday_next_by_scope() -> None:
    quarter = RecurrenceRule(
        pattern=RecurrencePattern.NTH_WEEKDAY,
        weekdays=(2,),
        nth_week=2,
        scope=RecurrenceScope.QUARTER,
    )
    assert next_occurrence_date(quarter, date(2026, 2, 10)) == date(2026, 4, 14)

    year = RecurrenceRule(
        pattern=RecurrencePattern.NTH_WEEKDAY,
        weekdays=(1,),
        nth_week=1,
        scope=RecurrenceScope.YEAR,
    )
    assert next_occurrence_date(year, date(2026, 5, 1)) == date(2027, 1, 4)


def test_nth_weekday_next_honours_sunday() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.NTH_WEEKDAY, weekdays=(0,), nth_week=1)
    assert next_occurrence_date(rule, date(2026, 10, 19)) == date(2026, 11, 1)


def test_nth_weekday_next_with_bad_weekday_returns_none() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.NTH_WEEKDAY, weekdays=(9,), nth_week=1)
    assert next_occurrence_date(rule, date(2026, 10, 19)) is None


def test_next_occurrence_defaults_to_injected_today() -> None:
    rule = RecurrenceRule(pattern=RecurrencePattern.WEEKLY, weekdays=(5,))
    assert next_occurrence(rule, today=date(2026, 10, 19)) == "2026-10-23"


def test_last_business_day_and_nth_weekday_helpers() -> None:
    assert last_business_day(2026, 2) == 27
    assert last_business_day(2026, 10) == 30
    assert nth_weekday_in_month(2026, 10, 1, 3) == date(2026, 10, 19)
    assert nth_weekday_in_month(2026, 10, 1, 5) is None


@pytest.mark.parametrize(
    ("rule", "expected"),
    [
        (RecurrenceRule(pattern=RecurrencePattern.MONTHLY, day_of_month=25), date(2026, 10, 25)),
        (RecurrenceRule(pattern=RecurrencePattern.MONTHLY, day_of_month=5), date(2026, 11, 5)),
        (RecurrenceRule(pattern=RecurrencePattern.QUARTERLY, day_of_month=1), date(2027, 1, 1)),
        (RecurrenceRule(pattern=RecurrencePattern.WEEKLY, weekdays=(1,)), date(2026, 10, 19)),
        (RecurrenceRule(pattern=RecurrencePattern.WEEKLY, weekdays=(2,)), date(2026, 10, 20)),
        (RecurrenceRule(pattern=RecurrencePattern.YEARLY), date(2027, 10, 19)),
        (
            RecurrenceRule(pattern=RecurrencePattern.NTH_WEEKDAY, weekdays=(1,), nth_week=3),
            date(2026, 10, 19),
        ),
        (
            RecurrenceRule(pattern=RecurrencePattern.NTH_WEEKDAY, weekdays=(1,), nth_week=2),
            date(2026, 11, 9),
        ),
    ],
)
def test_initial_due_date(rule, expected, today) -> None:
    assert initial_due_date(rule, today) == expected
