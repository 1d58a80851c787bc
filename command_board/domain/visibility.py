from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from .entities import DayLoad, TaskEntity
from .enums import TaskSection, TaskStatus, TaskType
from .recurrence import applies_to_date
from .sorting import sort_tasks


def is_relevant_on_date(task: TaskEntity, day: date) -> bool:
    """Whether ``task`` belongs on ``day``'s board.

    Completed recurring instances stay pinned to the day they were due; open
    ones follow their rule, but never before their due date and never after
    the series ended.
    """
    if task.type == TaskType.ONE_OFF:
        return task.due_date is not None and task.due_date == day

    if task.type != TaskType.RECURRING:
        return False

    if task.status == TaskStatus.DONE:
        return task.due_date is not None and task.due_date == day

    if task.recurrence is None:
        return False
    if not applies_to_date(task.recurrence, day):
        return False
    if task.due_date is not None and task.due_date > day:
        return False
    if task.ended_at is not None and day > task.ended_at:
        return False
    return True


def section_for(task: TaskEntity, today: date) -> TaskSection:
    if task.status in (TaskStatus.DONE, TaskStatus.SOMEDAY):
        return TaskSection.BACKLOG
    if task.due_date is None or task.due_date == today:
        return TaskSection.TODAY
    if task.due_date < today:
        return TaskSection.OVERDUE
    return TaskSection.FUTURE


def tasks_for_date(
    tasks: Iterable[TaskEntity],
    day: date,
    include_done: bool = False,
) -> list[TaskEntity]:
    return sort_tasks(
        task
        for task in tasks
        if (include_done or task.status != TaskStatus.DONE) and is_relevant_on_date(task, day)
    )


def overdue_tasks(tasks: Iterable[TaskEntity], day: date) -> list[TaskEntity]:
    # Recurring tasks never pile up as overdue, they simply reappear.
    return sort_tasks(
        task
        for task in tasks
        if task.status != TaskStatus.DONE
        and task.type == TaskType.ONE_OFF
        and task.due_date is not None
        and task.due_date < day
    )


def week_load(tasks: Iterable[TaskEntity], week_start: date) -> list[DayLoad]:
    snapshot = list(tasks)
    loads = []
    for offset in range(7):
        day = week_start + timedelta(days=offset)
        relevant = [task for task in snapshot if is_relevant_on_date(task, day)]
        total = sum(task.estimated_minutes or 0 for task in relevant if (task.estimated_minutes or 0) > 0)
        loads.append(DayLoad(day=day, total_minutes=total, task_count=len(relevant)))
    return loads
