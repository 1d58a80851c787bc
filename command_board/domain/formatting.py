from __future__ import annotations

import re

from .entities import RecurrenceRule
from .enums import RecurrencePattern, RecurrenceScope

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
FULL_DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

SCOPE_SUFFIXES = {
    RecurrenceScope.MONTH: "of month",
    RecurrenceScope.QUARTER: "of quarter",
    RecurrenceScope.YEAR: "of year",
}


def ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _day_list(weekdays: tuple[int, ...]) -> str | None:
    if not weekdays or any(not 0 <= day <= 6 for day in weekdays):
        return None
    return ", ".join(DAY_NAMES[day] for day in weekdays)


def format_recurrence(rule: RecurrenceRule) -> str:
    pattern = rule.pattern

    if pattern == RecurrencePattern.WEEKLY:
        days = _day_list(rule.weekdays)
        return f"Weekly on {days}" if days else "Weekly"

    if pattern == RecurrencePattern.BIWEEKLY:
        days = _day_list(rule.weekdays)
        return f"Every 2 weeks on {days}" if days else "Every 2 weeks"

    if pattern == RecurrencePattern.MONTHLY:
        if rule.day_of_month:
            return f"Monthly on the {ordinal(rule.day_of_month)}"
        return "Monthly"

    if pattern == RecurrencePattern.QUARTERLY:
        if rule.day_of_month:
            return f"Quarterly on day {rule.day_of_month}"
        return "Quarterly"

    if pattern == RecurrencePattern.YEARLY:
        return "Yearly"

    if pattern == RecurrencePattern.BUSINESS_DAYS:
        if rule.interval and rule.interval > 1:
            return f"Every {rule.interval} business days"
        return "Every business day"

    if pattern == RecurrencePattern.NTH_WEEKDAY:
        if rule.nth_week and rule.weekdays and 0 <= rule.weekdays[0] <= 6:
            day = FULL_DAY_NAMES[rule.weekdays[0]]
            suffix = SCOPE_SUFFIXES.get(rule.scope or RecurrenceScope.MONTH)
            label = f"{ordinal(rule.nth_week)} {day}"
            return f"{label} {suffix}" if suffix else label
        return "Monthly"

    return "Custom"


def format_minutes(minutes: int) -> str:
    if minutes <= 0:
        return "0m"
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def parse_minutes(value: str | int | float) -> int:
    if isinstance(value, (int, float)):
        return max(0, round(value))
    match = _LEADING_INT.match(value)
    if not match:
        return 0
    return max(0, int(match.group(1)))
