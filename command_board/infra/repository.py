from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import String, cast, delete, func, or_, select
from sqlalchemy.orm import Session, sessionmaker

from command_board.domain.entities import BoardDocument, RecurrenceRule, TaskEntity
from command_board.domain.enums import Priority, TaskStatus, TaskType
from command_board.domain.filters import TaskFilters

from .db import SessionLocal
from .models import LabelModel, StakeholderModel, TaskModel
from .serialization import parse_enum, rule_from_dict, rule_to_dict

STATUS_DONE = TaskStatus.DONE.value
STATUS_SOMEDAY = TaskStatus.SOMEDAY.value

TASK_COLUMNS = {column.key for column in TaskModel.__table__.columns}


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        type=parse_enum(TaskType, model.type, TaskType.ONE_OFF),
        priority=parse_enum(Priority, model.priority, Priority.P2),
        status=parse_enum(TaskStatus, model.status, TaskStatus.NOT_STARTED),
        created_at=model.created_at,
        sort_order=model.sort_order,
        due_date=model.due_date,
        completed_at=model.completed_at,
        ended_at=model.ended_at,
        notes=model.notes,
        stakeholders=tuple(model.stakeholders or ()),
        labels=tuple(model.labels or ()),
        blocker_reason=model.blocker_reason,
        recurrence=rule_from_dict(model.recurrence),
        parent_recurring_id=model.parent_recurring_id,
        estimated_minutes=model.estimated_minutes,
    )


def _to_columns(data: dict[str, Any]) -> dict[str, Any]:
    columns: dict[str, Any] = {}
    for key, value in data.items():
        if key not in TASK_COLUMNS:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, RecurrenceRule):
            value = rule_to_dict(value)
        elif isinstance(value, tuple):
            value = list(value)
        columns[key] = value
    return columns


def _apply_filters(stmt, filters: TaskFilters) -> object:
    if filters.filter_key == "done":
        stmt = stmt.where(TaskModel.status == STATUS_DONE)
    elif filters.filter_key == "someday":
        stmt = stmt.where(TaskModel.status == STATUS_SOMEDAY)

    if filters.search_term:
        pattern = f"%{filters.search_term}%"
        stmt = stmt.where(
            or_(
                TaskModel.title.ilike(pattern),
                TaskModel.notes.ilike(pattern),
                cast(TaskModel.labels, String).ilike(pattern),
            )
        )

    return stmt


class TaskRepository:
    def __init__(self, session_factory: sessionmaker | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    def list_tasks(self, filters: TaskFilters | None = None) -> list[TaskEntity]:
        with self._session_factory() as session:
            stmt = _apply_filters(select(TaskModel), filters or TaskFilters())
            stmt = stmt.order_by(TaskModel.sort_order.asc(), TaskModel.created_at.asc())
            return [_to_entity(task) for task in session.scalars(stmt)]

    def get_task(self, task_id: str) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            return _to_entity(task) if task else None

    def create_task(self, data: dict) -> TaskEntity:
        with self._session_factory() as session:
            task = self._add_task(session, data)
            session.commit()
            session.refresh(task)
            return _to_entity(task)

    def update_task(self, task_id: str, data: dict) -> Optional[TaskEntity]:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None
            for key, value in _to_columns(data).items():
                setattr(task, key, value)
            session.commit()
            session.refresh(task)
            return _to_entity(task)

    def complete_task(
        self,
        task_id: str,
        completed_at: datetime,
        successor: dict | None = None,
    ) -> tuple[Optional[TaskEntity], Optional[TaskEntity]]:
        """Mark a task done and append its successor in a single commit."""
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return None, None
            task.status = STATUS_DONE
            task.completed_at = completed_at
            next_task = self._add_task(session, successor) if successor else None
            session.commit()
            session.refresh(task)
            if next_task is not None:
                session.refresh(next_task)
                return _to_entity(task), _to_entity(next_task)
            return _to_entity(task), None

    def reorder_tasks(self, task_ids: list[str]) -> None:
        if not task_ids:
            return
        with self._session_factory() as session:
            tasks = session.scalars(select(TaskModel).where(TaskModel.id.in_(task_ids))).all()
            order_map = {task_id: index for index, task_id in enumerate(task_ids, start=1)}
            for task in tasks:
                task.sort_order = order_map.get(task.id, task.sort_order)
            session.commit()

    def delete_task(self, task_id: str) -> None:
        with self._session_factory() as session:
            task = session.get(TaskModel, task_id)
            if not task:
                return
            session.delete(task)
            session.commit()

    def list_labels(self) -> list[str]:
        return self._list_names(LabelModel)

    def add_label(self, name: str) -> bool:
        return self._add_name(LabelModel, name)

    def remove_label(self, name: str) -> None:
        self._remove_name(LabelModel, "labels", name)

    def list_stakeholders(self) -> list[str]:
        return self._list_names(StakeholderModel)

    def add_stakeholder(self, name: str) -> bool:
        return self._add_name(StakeholderModel, name)

    def remove_stakeholder(self, name: str) -> None:
        self._remove_name(StakeholderModel, "stakeholders", name)

    def load_board(self) -> BoardDocument:
        return BoardDocument(
            tasks=self.list_tasks(),
            labels=self.list_labels(),
            stakeholders=self.list_stakeholders(),
        )

    def replace_board(self, document: BoardDocument) -> None:
        with self._session_factory() as session:
            session.execute(delete(TaskModel))
            session.execute(delete(LabelModel))
            session.execute(delete(StakeholderModel))
            for task in document.tasks:
                session.add(TaskModel(**_to_columns(vars(task))))
            for index, name in enumerate(dict.fromkeys(document.labels), start=1):
                session.add(LabelModel(name=name, position=index))
            for index, name in enumerate(dict.fromkeys(document.stakeholders), start=1):
                session.add(StakeholderModel(name=name, position=index))
            session.commit()

    def _add_task(self, session: Session, data: dict) -> TaskModel:
        columns = _to_columns(data)
        if columns.get("sort_order") is None:
            columns["sort_order"] = self._next_sort_order(session)
        task = TaskModel(**columns)
        session.add(task)
        session.flush()
        return task

    def _list_names(self, model) -> list[str]:
        with self._session_factory() as session:
            stmt = select(model.name).order_by(model.position.asc(), model.name.asc())
            return list(session.scalars(stmt))

    def _add_name(self, model, name: str) -> bool:
        with self._session_factory() as session:
            if session.get(model, name) is not None:
                return False
            position = (session.scalar(select(func.max(model.position))) or 0) + 1
            session.add(model(name=name, position=position))
            session.commit()
            return True

    def _remove_name(self, model, column: str, name: str) -> None:
        with self._session_factory() as session:
            entry = session.get(model, name)
            if entry is not None:
                session.delete(entry)
            for task in session.scalars(select(TaskModel)):
                values = getattr(task, column) or []
                if name in values:
                    setattr(task, column, [value for value in values if value != name])
            session.commit()

    @staticmethod
    def _next_sort_order(session: Session) -> int:
        max_order = session.scalar(select(func.max(TaskModel.sort_order)))
        return (max_order or 0) + 1
