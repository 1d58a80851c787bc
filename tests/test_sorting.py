from __future__ import annotations

from datetime import datetime

from command_board.domain.enums import Priority, TaskStatus, TaskType
from command_board.domain.sorting import (
    UNASSIGNED,
    active_tasks,
    recurring_templates,
    sort_by_created_at,
    sort_by_labels,
    sort_tasks,
    tasks_by_stakeholder,
)


def test_sort_by_priority_then_status_then_manual_order(make_task) -> None:
    low = make_task(priority=Priority.P4, sort_order=1)
    urgent_waiting = make_task(priority=Priority.P0, status=TaskStatus.WAITING, sort_order=2)
    urgent_active = make_task(priority=Priority.P0, status=TaskStatus.IN_PROGRESS, sort_order=3)
    normal_second = make_task(priority=Priority.P2, sort_order=9)
    normal_first = make_task(priority=Priority.P2, sort_order=4)

    ordered = sort_tasks([low, urgent_waiting, urgent_active, normal_second, normal_first])

    assert ordered == [urgent_active, urgent_waiting, normal_first, normal_second, low]


def test_sort_is_stable_and_idempotent(make_task) -> None:
    tasks = [make_task(sort_order=0, title=name) for name in ("a", "b", "c")]
    tasks.append(make_task(priority=Priority.P1, sort_order=0))

    once = sort_tasks(tasks)

    assert [task.title for task in once[1:]] == ["a", "b", "c"]
    assert sort_tasks(once) == once


def test_active_tasks_drop_done(make_task) -> None:
    open_task = make_task()
    done = make_task(status=TaskStatus.DONE)
    assert active_tasks([done, open_task]) == [open_task]


def test_recurring_templates_skip_generated_instances(make_task) -> None:
    template = make_task(type=TaskType.RECURRING)
    instance = make_task(type=TaskType.RECURRING, parent_recurring_id=template.id)
    one_off = make_task()
    assert recurring_templates([template, instance, one_off]) == [template]


def test_tasks_by_stakeholder(make_task) -> None:
    shared = make_task(stakeholders=("Ana", "Ben"))
    solo = make_task()
    done = make_task(stakeholders=("Ana",), status=TaskStatus.DONE)

    grouped = tasks_by_stakeholder([shared, solo, done])

    assert grouped == {"Ana": [shared], "Ben": [shared], UNASSIGNED: [solo]}


def test_sort_by_created_at_newest_first(make_task) -> None:
    old = make_task(created_at=datetime(2026, 1, 1))
    new = make_task(created_at=datetime(2026, 6, 1))
    assert sort_by_created_at([old, new]) == [new, old]


def test_sort_by_labels_puts_unlabeled_last(make_task) -> None:
    bare = make_task()
    work = make_task(labels=("Work",))
    admin = make_task(labels=("admin",))
    assert sort_by_labels([bare, work, admin]) == [admin, work, bare]
