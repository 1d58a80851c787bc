"""JSON document codec for the board.

The document shape is ``{"tasks": [...], "labels": [...], "stakeholders": [...]}``
with camelCase task keys. Optional fields are omitted when absent.
"""
from __future__ import annotations

import json
import logging
import math
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

from command_board.domain.dates import format_iso, parse_iso
from command_board.domain.entities import BoardDocument, RecurrenceRule, TaskEntity
from command_board.domain.formatting import parse_minutes
from command_board.domain.enums import (
    Priority,
    RecurrencePattern,
    RecurrenceScope,
    TaskStatus,
    TaskType,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def parse_enum(cls: type[E], raw: Any, default: E) -> E:
    if raw is None:
        return default
    try:
        return cls(raw)
    except ValueError:
        return default


def _optional_int(raw: Any) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _optional_minutes(raw: Any) -> int | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return None
    if isinstance(raw, float) and not math.isfinite(raw):
        return None
    return parse_minutes(raw) or None


def rule_to_dict(rule: RecurrenceRule) -> dict[str, Any]:
    data: dict[str, Any] = {"pattern": str(rule.pattern)}
    if rule.weekdays:
        data["weekdays"] = list(rule.weekdays)
    if rule.interval is not None:
        data["interval"] = rule.interval
    if rule.nth_week is not None:
        data["nthWeek"] = rule.nth_week
    if rule.day_of_month is not None:
        data["dayOfMonth"] = rule.day_of_month
    if rule.scope is not None:
        data["scope"] = str(rule.scope)
    return data


def rule_from_dict(data: dict[str, Any] | None) -> RecurrenceRule | None:
    if not data or "pattern" not in data:
        return None
    raw_pattern = str(data["pattern"])
    try:
        pattern: RecurrencePattern | str = RecurrencePattern(raw_pattern)
    except ValueError:
        pattern = raw_pattern
    weekdays = tuple(
        day for day in (_optional_int(value) for value in data.get("weekdays") or []) if day is not None
    )
    return RecurrenceRule(
        pattern=pattern,
        weekdays=weekdays,
        interval=_optional_int(data.get("interval")),
        nth_week=_optional_int(data.get("nthWeek")),
        day_of_month=_optional_int(data.get("dayOfMonth")),
        scope=parse_enum(RecurrenceScope, data.get("scope"), None),
    )


def task_to_dict(task: TaskEntity) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": task.id,
        "title": task.title,
        "type": task.type.value,
        "priority": task.priority.value,
        "status": task.status.value,
        "createdAt": task.created_at.isoformat(),
        "sortOrder": task.sort_order,
    }
    optional = {
        "dueDate": format_iso(task.due_date) if task.due_date else None,
        "completedAt": task.completed_at.isoformat() if task.completed_at else None,
        "endedAt": format_iso(task.ended_at) if task.ended_at else None,
        "notes": task.notes,
        "stakeholders": list(task.stakeholders) if task.stakeholders else None,
        "labels": list(task.labels) if task.labels else None,
        "blockerReason": task.blocker_reason,
        "recurrence": rule_to_dict(task.recurrence) if task.recurrence else None,
        "parentRecurringId": task.parent_recurring_id,
        "estimatedMinutes": task.estimated_minutes,
    }
    data.update({key: value for key, value in optional.items() if value is not None})
    return data


def task_from_dict(data: dict[str, Any]) -> TaskEntity:
    created_raw = data.get("createdAt")
    completed_raw = data.get("completedAt")
    return TaskEntity(
        id=str(data.get("id") or uuid4()),
        title=str(data.get("title") or "New Task"),
        type=parse_enum(TaskType, data.get("type"), TaskType.ONE_OFF),
        priority=parse_enum(Priority, data.get("priority"), Priority.P2),
        status=parse_enum(TaskStatus, data.get("status"), TaskStatus.NOT_STARTED),
        created_at=datetime.fromisoformat(created_raw) if created_raw else datetime.now(),
        sort_order=_optional_int(data.get("sortOrder")) or 0,
        due_date=parse_iso(data["dueDate"]) if data.get("dueDate") else None,
        completed_at=datetime.fromisoformat(completed_raw) if completed_raw else None,
        ended_at=parse_iso(data["endedAt"]) if data.get("endedAt") else None,
        notes=data.get("notes"),
        stakeholders=tuple(data.get("stakeholders") or ()),
        labels=tuple(data.get("labels") or ()),
        blocker_reason=data.get("blockerReason"),
        recurrence=rule_from_dict(data.get("recurrence")),
        parent_recurring_id=data.get("parentRecurringId"),
        estimated_minutes=_optional_minutes(data.get("estimatedMinutes")),
    )


def document_to_dict(document: BoardDocument) -> dict[str, Any]:
    return {
        "tasks": [task_to_dict(task) for task in document.tasks],
        "labels": list(document.labels),
        "stakeholders": list(document.stakeholders),
    }


def document_from_dict(data: Any) -> BoardDocument:
    if not isinstance(data, dict):
        raise ValueError("Board document must be a JSON object")
    items = data.get("tasks") or []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise ValueError("Board document tasks must be a list of JSON objects")
    return BoardDocument(
        tasks=[task_from_dict(item) for item in items],
        labels=list(data.get("labels") or []),
        stakeholders=list(data.get("stakeholders") or []),
    )


def write_document(path: Path, document: BoardDocument) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(document_to_dict(document), indent=2, ensure_ascii=False)
    path.write_text(payload, encoding="utf-8")
    logger.info("Wrote %d tasks to %s", len(document.tasks), path)


def read_document(path: Path) -> BoardDocument:
    document = document_from_dict(json.loads(path.read_text(encoding="utf-8")))
    logger.info("Read %d tasks from %s", len(document.tasks), path)
    return document
