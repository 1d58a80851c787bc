from __future__ import annotations

from collections.abc import Iterable

from .entities import TaskEntity
from .enums import PRIORITY_WEIGHT, STATUS_WEIGHT, TaskStatus, TaskType

UNASSIGNED = "Unassigned"


def _sort_key(task: TaskEntity) -> tuple[int, int, int]:
    return (
        PRIORITY_WEIGHT.get(task.priority, len(PRIORITY_WEIGHT)),
        STATUS_WEIGHT.get(task.status, len(STATUS_WEIGHT)),
        task.sort_order,
    )


def sort_tasks(tasks: Iterable[TaskEntity]) -> list[TaskEntity]:
    """Priority first, then status, then the manual drag-and-drop order.

    ``sorted`` is stable, so tasks with equal keys keep their input order.
    """
    return sorted(tasks, key=_sort_key)


def active_tasks(tasks: Iterable[TaskEntity]) -> list[TaskEntity]:
    return sort_tasks(task for task in tasks if task.status != TaskStatus.DONE)


def done_tasks(tasks: Iterable[TaskEntity]) -> list[TaskEntity]:
    return sort_tasks(task for task in tasks if task.status == TaskStatus.DONE)


def recurring_templates(tasks: Iterable[TaskEntity]) -> list[TaskEntity]:
    return sort_tasks(
        task
        for task in tasks
        if task.type == TaskType.RECURRING and not task.parent_recurring_id
    )


def someday_tasks(tasks: Iterable[TaskEntity]) -> list[TaskEntity]:
    return sort_tasks(task for task in tasks if task.status == TaskStatus.SOMEDAY)


def tasks_by_stakeholder(tasks: Iterable[TaskEntity]) -> dict[str, list[TaskEntity]]:
    grouped: dict[str, list[TaskEntity]] = {}
    for task in tasks:
        if task.status == TaskStatus.DONE:
            continue
        for stakeholder in task.stakeholders or (UNASSIGNED,):
            grouped.setdefault(stakeholder, []).append(task)
    return {key: sort_tasks(value) for key, value in grouped.items()}


def sort_by_created_at(tasks: Iterable[TaskEntity]) -> list[TaskEntity]:
    return sorted(tasks, key=lambda task: task.created_at, reverse=True)


def sort_by_labels(tasks: Iterable[TaskEntity]) -> list[TaskEntity]:
    # Unlabeled tasks go last.
    def key(task: TaskEntity) -> tuple[bool, str]:
        label = task.labels[0].lower() if task.labels else ""
        return (not label, label)

    return sorted(tasks, key=key)
