from __future__ import annotations

import pytest

from command_board.domain.entities import RecurrenceRule
from command_board.domain.enums import RecurrencePattern, RecurrenceScope
from command_board.domain.formatting import format_minutes, format_recurrence, ordinal, parse_minutes


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1, "1st"),
        (2, "2nd"),
        (3, "3rd"),
        (4, "4th"),
        (11, "11th"),
        (12, "12th"),
        (13, "13th"),
        (21, "21st"),
        (22, "22nd"),
        (53, "53rd"),
        (111, "111th"),
    ],
)
def test_ordinal(value, expected) -> None:
    assert ordinal(value) == expected


@pytest.mark.parametrize(
    ("rule", "expected"),
    [
        (RecurrenceRule(pattern=RecurrencePattern.WEEKLY, weekdays=(1, 3)), "Weekly on Mon, Wed"),
        (RecurrenceRule(pattern=RecurrencePattern.WEEKLY), "Weekly"),
        (RecurrenceRule(pattern=RecurrencePattern.BIWEEKLY), "Every 2 weeks"),
        (RecurrenceRule(pattern=RecurrencePattern.MONTHLY, day_of_month=15), "Monthly on the 15th"),
        (RecurrenceRule(pattern=RecurrencePattern.QUARTERLY, day_of_month=1), "Quarterly on day 1"),
        (RecurrenceRule(pattern=RecurrencePattern.YEARLY), "Yearly"),
        (RecurrenceRule(pattern=RecurrencePattern.BUSINESS_DAYS), "Every business day"),
        (
            RecurrenceRule(pattern=RecurrencePattern.BUSINESS_DAYS, interval=3),
            "Every 3 business days",
        ),
        (
            RecurrenceRule(
                pattern=RecurrencePattern.NTH_WEEKDAY,
                weekdays=(2,),
                nth_week=3,
                scope=RecurrenceScope.QUARTER,
            ),
            "3rd Tuesday of quarter",
        ),
        (
            RecurrenceRule(pattern=RecurrencePattern.NTH_WEEKDAY, weekdays=(5,), nth_week=1),
            "1st Friday of month",
        ),
    ],
)
def test_format_recurrence(rule, expected) -> None:
    assert format_recurrence(rule) == expected


@pytest.mark.parametrize(
    "rule",
    [
        RecurrenceRule(pattern=RecurrencePattern.NTH_WEEKDAY),
        RecurrenceRule(pattern=RecurrencePattern.NTH_WEEKDAY, weekdays=(8,), nth_week=2),
        RecurrenceRule(pattern=RecurrencePattern.WEEKLY, weekdays=(7,)),
        RecurrenceRule(pattern="hourly"),
    ],
)
def test_malformed_rules_fall_back_to_generic_label(rule) -> None:
    label = format_recurrence(rule)
    assert isinstance(label, str)
    assert label


def test_format_minutes() -> None:
    assert format_minutes(0) == "0m"
    assert format_minutes(45) == "45m"
    assert format_minutes(120) == "2h"
    assert format_minutes(95) == "1h 35m"


def test_parse_minutes() -> None:
    assert parse_minutes("30") == 30
    assert parse_minutes(" 15 min") == 15
    assert parse_minutes("abc") == 0
    assert parse_minutes(-5) == 0
    assert parse_minutes(12.6) == 13
