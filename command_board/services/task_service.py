from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable

from command_board.domain.dates import start_of_week
from command_board.domain.entities import DayLoad, TaskEntity
from command_board.domain.enums import Priority, TaskSection, TaskStatus, TaskType
from command_board.domain.filters import TaskFilters
from command_board.domain.recurrence import initial_due_date, next_occurrence_date
from command_board.domain.sorting import (
    active_tasks,
    done_tasks,
    recurring_templates,
    someday_tasks,
    sort_by_created_at,
    sort_by_labels,
    sort_tasks,
    tasks_by_stakeholder,
)
from command_board.domain.visibility import (
    is_relevant_on_date,
    overdue_tasks,
    section_for,
    tasks_for_date,
    week_load,
)
from command_board.infra.repository import TaskRepository
from command_board.infra.serialization import read_document, write_document

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Task"


class TaskService:
    def __init__(
        self,
        repo: TaskRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repo = repo
        self._clock = clock or datetime.now

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        tasks = self._repo.list_tasks(filters)
        today = self.today()

        if filters.due_on:
            return tasks_for_date(tasks, filters.due_on, include_done=True)

        key = filters.filter_key
        if key == "today":
            due = tasks_for_date(tasks, today)
            seen = {task.id for task in due}
            no_date = [
                task
                for task in tasks
                if task.type == TaskType.ONE_OFF
                and task.due_date is None
                and task.status not in (TaskStatus.DONE, TaskStatus.SOMEDAY)
                and task.id not in seen
            ]
            return overdue_tasks(tasks, today) + sort_tasks(due + no_date)
        if key == "overdue":
            return overdue_tasks(tasks, today)
        if key == "upcoming":
            return sort_tasks(
                task for task in tasks if section_for(task, today) == TaskSection.FUTURE
            )
        if key == "someday":
            return someday_tasks(tasks)
        if key == "recurring":
            return recurring_templates(tasks)
        if key == "done":
            return done_tasks(tasks)
        if key == "people":
            groups = tasks_by_stakeholder(tasks).values()
            unique = {task.id: task for group in groups for task in group}
            return list(unique.values())

        active = active_tasks(tasks)
        if filters.sort_by == "created":
            return sort_by_created_at(active)
        if filters.sort_by == "labels":
            return sort_by_labels(active)
        return active

    def stakeholder_groups(self, filters: TaskFilters) -> dict[str, list[TaskEntity]]:
        """Open tasks keyed by stakeholder, unassigned ones under "Unassigned"."""
        return tasks_by_stakeholder(self._repo.list_tasks(filters))

    def get_task(self, task_id: str) -> TaskEntity | None:
        return self._repo.get_task(task_id)

    def create_task(self, data: dict) -> TaskEntity:
        normalized = self._normalize_data(data)
        normalized.setdefault("title", DEFAULT_TITLE)
        normalized.setdefault("type", TaskType.ONE_OFF.value)
        normalized.setdefault("priority", Priority.P2.value)
        normalized.setdefault("status", TaskStatus.NOT_STARTED.value)
        normalized.setdefault("created_at", self.now())

        rule = normalized.get("recurrence")
        if normalized["type"] == TaskType.RECURRING.value and rule and not normalized.get("due_date"):
            normalized["due_date"] = initial_due_date(rule, self.today())
        if normalized["type"] == TaskType.ONE_OFF.value:
            normalized["recurrence"] = None

        if normalized["status"] == TaskStatus.DONE.value:
            normalized.setdefault("completed_at", self.now())

        task = self._repo.create_task(normalized)
        logger.info("Created task %s (%s)", task.id, task.type.value)
        return task

    def update_task(self, task_id: str, data: dict) -> TaskEntity | None:
        normalized = self._normalize_data(data)
        status = normalized.get("status")
        if status == TaskStatus.DONE.value and "completed_at" not in normalized:
            normalized["completed_at"] = self.now()
        if status and status != TaskStatus.DONE.value:
            normalized["completed_at"] = None
        if normalized.get("type") == TaskType.ONE_OFF.value:
            normalized["recurrence"] = None
        return self._repo.update_task(task_id, normalized)

    def delete_task(self, task_id: str) -> None:
        self._repo.delete_task(task_id)

    def complete_task(self, task_id: str) -> TaskEntity | None:
        """Mark a task done; recurring tasks spawn their next instance.

        Returns the completed task. The successor, when any, is written in
        the same commit.
        """
        task = self._repo.get_task(task_id)
        if not task:
            return None
        if task.status == TaskStatus.DONE:
            # Already completed; its successor, if any, exists.
            return task

        successor = self._successor_data(task)
        completed, _ = self._repo.complete_task(task_id, self.now(), successor)
        return completed

    def uncomplete_task(self, task_id: str) -> TaskEntity | None:
        return self.update_task(task_id, {"status": TaskStatus.NOT_STARTED.value})

    def end_task(self, task_id: str) -> TaskEntity | None:
        task = self._repo.update_task(task_id, {"ended_at": self.today()})
        if task:
            logger.info("Ended series of task %s on %s", task.id, task.ended_at)
        return task

    def reorder_tasks(self, task_ids: list[str]) -> None:
        self._repo.reorder_tasks(task_ids)

    def list_labels(self) -> list[str]:
        return self._repo.list_labels()

    def add_label(self, label: str) -> bool:
        label = label.strip()
        return bool(label) and self._repo.add_label(label)

    def remove_label(self, label: str) -> None:
        self._repo.remove_label(label)

    def list_stakeholders(self) -> list[str]:
        return self._repo.list_stakeholders()

    def add_stakeholder(self, stakeholder: str) -> bool:
        stakeholder = stakeholder.strip()
        return bool(stakeholder) and self._repo.add_stakeholder(stakeholder)

    def remove_stakeholder(self, stakeholder: str) -> None:
        self._repo.remove_stakeholder(stakeholder)

    def get_stats(self) -> dict[str, int]:
        tasks = self._repo.list_tasks(TaskFilters())
        today = self.today()
        return {
            "total": len(tasks),
            "in_progress": sum(1 for task in tasks if task.status == TaskStatus.IN_PROGRESS),
            "done": sum(1 for task in tasks if task.status == TaskStatus.DONE),
            "overdue": len(overdue_tasks(tasks, today)),
            "due_today": sum(
                1
                for task in tasks
                if task.status != TaskStatus.DONE and is_relevant_on_date(task, today)
            ),
        }

    def week_load(self) -> list[DayLoad]:
        next_week = start_of_week(self.today()) + timedelta(days=7)
        return week_load(self._repo.list_tasks(TaskFilters()), next_week)

    def export_document(self, path: Path) -> None:
        write_document(path, self._repo.load_board())

    def import_document(self, path: Path) -> int:
        document = read_document(path)
        self._repo.replace_board(document)
        return len(document.tasks)

    def _normalize_data(self, data: dict) -> dict:
        normalized = dict(data)
        for key in ("status", "type", "priority"):
            value = normalized.get(key)
            if isinstance(value, (TaskStatus, TaskType, Priority)):
                normalized[key] = value.value
        for key in ("labels", "stakeholders"):
            if key in normalized:
                normalized[key] = tuple(normalized[key] or ())
        return normalized

    def _successor_data(self, task: TaskEntity) -> dict | None:
        if task.type != TaskType.RECURRING or task.recurrence is None:
            return None

        next_due = next_occurrence_date(task.recurrence, task.due_date, today=self.today())
        if next_due is None:
            logger.info("Series of task %s produced no next date; not continuing", task.id)
            return None
        if task.ended_at and next_due > task.ended_at:
            logger.info("Series of task %s ended on %s; not continuing", task.id, task.ended_at)
            return None

        return {
            "title": task.title,
            "type": TaskType.RECURRING.value,
            "priority": task.priority.value,
            "status": TaskStatus.NOT_STARTED.value,
            "created_at": self.now(),
            "due_date": next_due,
            "notes": task.notes,
            "stakeholders": task.stakeholders,
            "labels": task.labels,
            "recurrence": task.recurrence,
            "parent_recurring_id": task.parent_recurring_id or task.id,
            "estimated_minutes": task.estimated_minutes,
            "ended_at": task.ended_at,
        }
