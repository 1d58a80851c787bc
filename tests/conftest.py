from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime  # noqa: E402
from itertools import count  # noqa: E402

import pytest  # noqa: E402

from command_board.domain.entities import TaskEntity  # noqa: E402
from command_board.domain.enums import Priority, TaskStatus, TaskType  # noqa: E402

# Monday
TODAY = date(2026, 10, 19)
NOW = datetime(2026, 10, 19, 9, 30)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def make_task():
    ids = count(1)

    def factory(**overrides) -> TaskEntity:
        number = next(ids)
        values = {
            "id": f"task-{number}",
            "title": f"Task {number}",
            "type": TaskType.ONE_OFF,
            "priority": Priority.P2,
            "status": TaskStatus.NOT_STARTED,
            "created_at": NOW,
            "sort_order": number,
        }
        values.update(overrides)
        return TaskEntity(**values)

    return factory
