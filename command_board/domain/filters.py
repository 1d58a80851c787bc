from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

VIEW_KEYS = ("all", "today", "overdue", "upcoming", "someday", "recurring", "people", "done")
SORT_KEYS = ("priority", "created", "labels")


@dataclass(frozen=True)
class TaskFilters:
    filter_key: str = "all"
    search: str | None = None
    due_on: Optional[date] = None
    sort_by: str = "priority"

    def __post_init__(self) -> None:
        if self.filter_key not in VIEW_KEYS:
            raise ValueError(f"Unknown view: {self.filter_key!r}")
        if self.sort_by not in SORT_KEYS:
            raise ValueError(f"Unknown sort mode: {self.sort_by!r}")

    @property
    def search_term(self) -> str | None:
        term = (self.search or "").strip().lower()
        return term or None
