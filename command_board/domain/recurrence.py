"""Recurrence rule evaluation.

Two questions are answered here: does a rule occur on a given day, and
which day comes next after a completed instance. Every function degrades to
``False``/``None`` on incomplete rules so a half-edited rule can never break
task list rendering.
"""
from __future__ import annotations

from datetime import date
from typing import Callable

from .dates import (
    add_days,
    add_months,
    add_weeks,
    add_years,
    day_of_week,
    days_in_month,
    format_iso,
    is_quarter_start_month,
    is_weekend,
    roll_date,
    set_weekday,
    start_of_month,
    start_of_quarter,
    start_of_year,
    to_date,
)
from .entities import RecurrenceRule
from .enums import RecurrencePattern, RecurrenceScope

MONDAY = 1


def last_business_day(year: int, month: int) -> int:
    day = days_in_month(year, month)
    while day > 1 and is_weekend(date(year, month, day)):
        day -= 1
    return day


def nth_weekday_in_month(year: int, month: int, weekday: int, nth: int) -> date | None:
    if not 0 <= weekday <= 6 or nth < 1:
        return None
    first = date(year, month, 1)
    offset = (weekday - day_of_week(first)) % 7
    candidate = add_days(first, offset + 7 * (nth - 1))
    if candidate.month != month:
        return None
    return candidate


def _in_scope_month(scope: RecurrenceScope | None, day: date) -> bool:
    if scope == RecurrenceScope.YEAR:
        return day.month == 1
    if scope == RecurrenceScope.QUARTER:
        return is_quarter_start_month(day)
    return True


# -- applies_to_date ---------------------------------------------------------

def _matches_weekdays(rule: RecurrenceRule, day: date) -> bool:
    # Biweekly cadence is only enforced when stepping to the next date.
    if rule.weekdays:
        return day_of_week(day) in rule.weekdays
    return True


def _matches_day_of_month(rule: RecurrenceRule, day: date) -> bool:
    if not rule.day_of_month:
        return False
    if rule.day_of_month > days_in_month(day.year, day.month):
        return day.day == last_business_day(day.year, day.month)
    return day.day == rule.day_of_month


def _matches_quarterly(rule: RecurrenceRule, day: date) -> bool:
    return is_quarter_start_month(day) and _matches_day_of_month(rule, day)


def _matches_yearly(rule: RecurrenceRule, day: date) -> bool:
    # No anchor date reaches this predicate; yearly tasks surface via due date only.
    return False


def _matches_business_day(rule: RecurrenceRule, day: date) -> bool:
    return not is_weekend(day)


def _matches_nth_weekday(rule: RecurrenceRule, day: date) -> bool:
    if not rule.nth_week or not rule.weekdays:
        return False
    weekday = rule.weekdays[0]
    if day_of_week(day) != weekday:
        return False
    if not _in_scope_month(rule.scope, day):
        return False

    count = 0
    cursor = start_of_month(day)
    while cursor <= day:
        if day_of_week(cursor) == weekday:
            count += 1
        cursor = add_days(cursor, 1)
    return count == rule.nth_week


_MATCHERS: dict[str, Callable[[RecurrenceRule, date], bool]] = {
    RecurrencePattern.WEEKLY: _matches_weekdays,
    RecurrencePattern.BIWEEKLY: _matches_weekdays,
    RecurrencePattern.MONTHLY: _matches_day_of_month,
    RecurrencePattern.QUARTERLY: _matches_quarterly,
    RecurrencePattern.YEARLY: _matches_yearly,
    RecurrencePattern.BUSINESS_DAYS: _matches_business_day,
    RecurrencePattern.NTH_WEEKDAY: _matches_nth_weekday,
}


def applies_to_date(rule: RecurrenceRule, day: date) -> bool:
    matcher = _MATCHERS.get(rule.pattern)
    if matcher is None:
        return False
    return matcher(rule, day)


# -- next_occurrence ---------------------------------------------------------

def _next_weekly_date(base: date, weekdays: tuple[int, ...]) -> date:
    valid = sorted(day for day in weekdays if 0 <= day <= 6)
    if not valid:
        return add_weeks(base, 1)

    current = day_of_week(base)
    for weekday in valid:
        if weekday > current:
            return set_weekday(base, weekday)
    return set_weekday(add_weeks(base, 1), valid[0])


def _next_weekly(rule: RecurrenceRule, base: date) -> date | None:
    return _next_weekly_date(base, rule.weekdays)


def _next_biweekly(rule: RecurrenceRule, base: date) -> date | None:
    return add_weeks(_next_weekly_date(base, rule.weekdays), 1)


def _next_monthly(rule: RecurrenceRule, base: date) -> date | None:
    target = rule.day_of_month or base.day
    shifted = add_months(base, 1)
    day = min(target, days_in_month(shifted.year, shifted.month))
    return date(shifted.year, shifted.month, day)


def _next_quarterly(rule: RecurrenceRule, base: date) -> date | None:
    shifted = add_months(base, 3)
    if rule.day_of_month:
        # Not clamped: day 31 in a 30-day month rolls into the next month.
        return roll_date(shifted.year, shifted.month, rule.day_of_month)
    return shifted


def _next_yearly(rule: RecurrenceRule, base: date) -> date | None:
    return add_years(base, 1)


def _next_business_day(rule: RecurrenceRule, base: date) -> date | None:
    step = max(int(rule.interval or 1), 1)
    current = add_days(base, 1)
    consumed = 0
    while consumed < step:
        if not is_weekend(current):
            consumed += 1
            if consumed >= step:
                break
        current = add_days(current, 1)

    while is_weekend(current):
        current = add_days(current, 1)
    return current


def _next_nth_weekday(rule: RecurrenceRule, base: date) -> date | None:
    nth = rule.nth_week or 1
    weekday = rule.weekdays[0] if rule.weekdays else MONDAY
    if not 0 <= weekday <= 6:
        return None

    if rule.scope == RecurrenceScope.YEAR:
        current = start_of_year(add_years(base, 1))
    elif rule.scope == RecurrenceScope.QUARTER:
        current = add_months(start_of_quarter(base), 3)
    else:
        current = add_months(start_of_month(base), 1)

    while day_of_week(current) != weekday:
        current = add_days(current, 1)
    return add_weeks(current, nth - 1)


_STEPPERS: dict[str, Callable[[RecurrenceRule, date], date | None]] = {
    RecurrencePattern.WEEKLY: _next_weekly,
    RecurrencePattern.BIWEEKLY: _next_biweekly,
    RecurrencePattern.MONTHLY: _next_monthly,
    RecurrencePattern.QUARTERLY: _next_quarterly,
    RecurrencePattern.YEARLY: _next_yearly,
    RecurrencePattern.BUSINESS_DAYS: _next_business_day,
    RecurrencePattern.NTH_WEEKDAY: _next_nth_weekday,
}


def next_occurrence_date(
    rule: RecurrenceRule,
    from_date: date | str | None = None,
    *,
    today: date | None = None,
) -> date | None:
    stepper = _STEPPERS.get(rule.pattern)
    if stepper is None:
        return None
    if from_date is None:
        base = today or date.today()
    else:
        base = to_date(from_date)
    return stepper(rule, base)


def next_occurrence(
    rule: RecurrenceRule,
    from_date: date | str | None = None,
    *,
    today: date | None = None,
) -> str | None:
    """Next scheduled day strictly after ``from_date`` as ``yyyy-MM-dd``.

    Without ``from_date`` the computation starts from ``today``, which falls
    back to the wall clock when not given.
    """
    next_day = next_occurrence_date(rule, from_date, today=today)
    return format_iso(next_day) if next_day else None


# -- seeding -----------------------------------------------------------------

def _this_month_target(day_of_month: int, today: date) -> date:
    return date(today.year, today.month, min(day_of_month, days_in_month(today.year, today.month)))


def initial_due_date(rule: RecurrenceRule, today: date) -> date | None:
    """First due date for a newly defined series.

    Prefers an occurrence still ahead in the current month or scope and only
    steps forward when it has already passed.
    """
    if rule.pattern == RecurrencePattern.MONTHLY and rule.day_of_month:
        candidate = _this_month_target(rule.day_of_month, today)
        if today <= candidate:
            return candidate
        return next_occurrence_date(rule, today)

    if rule.pattern == RecurrencePattern.QUARTERLY and rule.day_of_month:
        if is_quarter_start_month(today):
            candidate = _this_month_target(rule.day_of_month, today)
            if today <= candidate:
                return candidate
        return next_occurrence_date(rule, today)

    if rule.pattern == RecurrencePattern.NTH_WEEKDAY and rule.nth_week and rule.weekdays:
        if _in_scope_month(rule.scope, today):
            candidate = nth_weekday_in_month(
                today.year, today.month, rule.weekdays[0], rule.nth_week
            )
            if candidate is not None and candidate >= today:
                return candidate
        return next_occurrence_date(rule, today)

    if applies_to_date(rule, today):
        return today
    return next_occurrence_date(rule, today)
