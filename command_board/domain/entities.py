from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from .enums import Priority, RecurrencePattern, RecurrenceScope, TaskStatus, TaskType


@dataclass(frozen=True)
class RecurrenceRule:
    # Unknown pattern strings from storage are kept as-is and never match.
    pattern: RecurrencePattern | str
    weekdays: tuple[int, ...] = ()
    interval: int | None = None
    nth_week: int | None = None
    day_of_month: int | None = None
    scope: RecurrenceScope | None = None


@dataclass(frozen=True)
class TaskEntity:
    id: str
    title: str
    type: TaskType
    priority: Priority
    status: TaskStatus
    created_at: datetime
    sort_order: int
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    ended_at: Optional[date] = None
    notes: str | None = None
    stakeholders: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()
    blocker_reason: str | None = None
    recurrence: RecurrenceRule | None = None
    parent_recurring_id: str | None = None
    estimated_minutes: int | None = None

    @property
    def is_recurring(self) -> bool:
        return self.type == TaskType.RECURRING

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE


@dataclass(frozen=True)
class BoardDocument:
    tasks: list[TaskEntity] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    stakeholders: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DayLoad:
    day: date
    total_minutes: int
    task_count: int
