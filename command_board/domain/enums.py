from __future__ import annotations

from enum import StrEnum


class TaskStatus(StrEnum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    WAITING = "waiting"
    NEEDS_REVIEW = "needs-review"
    BLOCKED = "blocked"
    SOMEDAY = "someday"
    DONE = "done"


class TaskType(StrEnum):
    ONE_OFF = "one-off"
    RECURRING = "recurring"


class Priority(StrEnum):
    P0 = "p0"
    P1 = "p1"
    P2 = "p2"
    P3 = "p3"
    P4 = "p4"


class RecurrencePattern(StrEnum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    BUSINESS_DAYS = "business-days"
    NTH_WEEKDAY = "nth-weekday"


class RecurrenceScope(StrEnum):
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class TaskSection(StrEnum):
    OVERDUE = "overdue"
    TODAY = "today"
    FUTURE = "future"
    BACKLOG = "backlog"


# Lower weight sorts first.
PRIORITY_WEIGHT = {
    Priority.P0: 0,
    Priority.P1: 1,
    Priority.P2: 2,
    Priority.P3: 3,
    Priority.P4: 4,
}

STATUS_WEIGHT = {
    TaskStatus.IN_PROGRESS: 0,
    TaskStatus.NOT_STARTED: 1,
    TaskStatus.NEEDS_REVIEW: 2,
    TaskStatus.WAITING: 3,
    TaskStatus.BLOCKED: 4,
    TaskStatus.SOMEDAY: 5,
    TaskStatus.DONE: 6,
}

PRIORITY_LABELS = {
    Priority.P0: "P0 - Critical",
    Priority.P1: "P1 - High",
    Priority.P2: "P2 - Normal",
    Priority.P3: "P3 - Low",
    Priority.P4: "P4 - Lowest",
}

STATUS_LABELS = {
    TaskStatus.NOT_STARTED: "Not Started",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.WAITING: "Waiting",
    TaskStatus.NEEDS_REVIEW: "Needs Review",
    TaskStatus.BLOCKED: "Blocked",
    TaskStatus.SOMEDAY: "Someday",
    TaskStatus.DONE: "Done",
}
