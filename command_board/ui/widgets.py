from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date

from PySide6.QtCore import QSize, Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QVBoxLayout,
    QWidget,
)

from command_board.domain.dates import format_iso
from command_board.domain.entities import TaskEntity
from command_board.domain.enums import PRIORITY_LABELS, STATUS_LABELS, Priority, TaskSection
from command_board.domain.formatting import DAY_NAMES, format_minutes, format_recurrence
from command_board.domain.visibility import section_for

PRIORITY_COLORS = {
    Priority.P0: "#E24A4A",
    Priority.P1: "#E57B63",
    Priority.P2: "#E0B25B",
    Priority.P3: "#7CC4A1",
    Priority.P4: "#9CA3AF",
}


def _repolish(widget: QWidget) -> None:
    widget.style().unpolish(widget)
    widget.style().polish(widget)


def _chip(text: str, kind: str) -> QLabel:
    chip = QLabel(text)
    chip.setProperty("class", f"chip-{kind}")
    return chip


class TaskCard(QFrame):
    """One row of the task list: title, priority pill, chips and a footer."""

    def __init__(self, task: TaskEntity, today: date, parent=None):
        super().__init__(parent)
        self.task = task
        self.setObjectName("TaskCard")
        self.setProperty("section", section_for(task, today).value)
        self.setProperty("done", task.is_done)

        title = QLabel(task.title.strip() or "Untitled")
        title.setProperty("class", "task-title")
        title.setWordWrap(True)

        pill = QLabel(PRIORITY_LABELS.get(task.priority, str(task.priority)))
        pill.setProperty("class", "task-priority")
        pill.setStyleSheet(f"background-color: {PRIORITY_COLORS.get(task.priority, '#9CA3AF')};")

        top = QHBoxLayout()
        top.setSpacing(8)
        top.addWidget(title, 1)
        top.addWidget(pill, 0, Qt.AlignTop)

        chips = QHBoxLayout()
        chips.setSpacing(4)
        if task.is_recurring and task.recurrence:
            chips.addWidget(_chip(format_recurrence(task.recurrence), "recurrence"))
        for label in task.labels:
            chips.addWidget(_chip(label, "label"))
        for stakeholder in task.stakeholders:
            chips.addWidget(_chip(f"@{stakeholder}", "person"))
        chips.addStretch()

        footer = QLabel(" | ".join(self._footer_parts(task, today)))
        footer.setProperty("class", "task-meta")
        footer.setWordWrap(True)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(4)
        layout.addLayout(top)
        if chips.count() > 1:
            layout.addLayout(chips)
        layout.addWidget(footer)

    @staticmethod
    def _footer_parts(task: TaskEntity, today: date) -> list[str]:
        parts = [STATUS_LABELS.get(task.status, str(task.status))]
        if task.due_date:
            prefix = "Overdue since" if section_for(task, today) == TaskSection.OVERDUE else "Due"
            parts.append(f"{prefix} {format_iso(task.due_date)}")
        if task.ended_at:
            parts.append(f"Series ends {format_iso(task.ended_at)}")
        if task.estimated_minutes:
            parts.append(format_minutes(task.estimated_minutes))
        if task.blocker_reason:
            parts.append(f"Blocked: {task.blocker_reason}")
        return parts

    def set_selected(self, selected: bool) -> None:
        self.setProperty("selected", selected)
        _repolish(self)


class WeekdayPicker(QWidget):
    """Seven checkboxes, Sunday first, matching the 0-6 weekday indices."""

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)
        self.boxes: list[QCheckBox] = []
        for name in DAY_NAMES:
            box = QCheckBox(name)
            layout.addWidget(box)
            self.boxes.append(box)

    def weekdays(self) -> tuple[int, ...]:
        return tuple(index for index, box in enumerate(self.boxes) if box.isChecked())

    def set_weekdays(self, weekdays: Iterable[int]) -> None:
        wanted = set(weekdays)
        for index, box in enumerate(self.boxes):
            box.setChecked(index in wanted)


class TaskList(QListWidget):
    """Task cards with optional drag-and-drop reordering."""

    def __init__(self, on_reorder: Callable[[list[str]], None] | None = None, parent=None):
        super().__init__(parent)
        self._on_reorder = on_reorder
        self.setResizeMode(QListView.Adjust)
        self.setSpacing(6)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.currentItemChanged.connect(self._highlight)
        self.set_reorder_enabled(True)

    def populate(self, tasks: Iterable[TaskEntity], today: date) -> None:
        self.clear()
        for task in tasks:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            self.addItem(item)
            self.setItemWidget(item, TaskCard(task, today))
        self._fit_items()

    def populate_groups(self, groups: dict[str, list[TaskEntity]], today: date) -> None:
        """Cards under a plain header per group; a task may appear in several groups."""
        self.clear()
        for name, tasks in groups.items():
            header = QListWidgetItem(f"{name} ({len(tasks)})")
            header.setFlags(Qt.NoItemFlags)
            self.addItem(header)
            for task in tasks:
                item = QListWidgetItem()
                item.setData(Qt.UserRole, task.id)
                self.addItem(item)
                self.setItemWidget(item, TaskCard(task, today))
        self._fit_items()

    def task_ids(self) -> list[str]:
        ids = (self.item(row).data(Qt.UserRole) for row in range(self.count()))
        return [task_id for task_id in ids if task_id]

    def row_of(self, task_id: str) -> int:
        for row in range(self.count()):
            if self.item(row).data(Qt.UserRole) == task_id:
                return row
        return -1

    def task_at(self, item: QListWidgetItem | None) -> TaskEntity | None:
        card = self.itemWidget(item) if item is not None else None
        return card.task if isinstance(card, TaskCard) else None

    def set_reorder_enabled(self, enabled: bool) -> None:
        self.setDragEnabled(enabled)
        self.setAcceptDrops(enabled)
        self.setDropIndicatorShown(enabled)
        self.setDragDropMode(
            QAbstractItemView.InternalMove if enabled else QAbstractItemView.NoDragDrop
        )

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._fit_items()

    def dropEvent(self, event) -> None:  # type: ignore[override]
        super().dropEvent(event)
        if self._on_reorder:
            self._on_reorder(self.task_ids())

    def _fit_items(self) -> None:
        width = self.viewport().width() - 2 * self.spacing()
        for row in range(self.count()):
            item = self.item(row)
            card = self.itemWidget(item)
            if card is None:
                continue
            card.setFixedWidth(width)
            card.adjustSize()
            item.setSizeHint(QSize(width, card.sizeHint().height()))

    def _highlight(self, current: QListWidgetItem | None, previous: QListWidgetItem | None) -> None:
        for item, selected in ((previous, False), (current, True)):
            card = self.itemWidget(item) if item is not None else None
            if isinstance(card, TaskCard):
                card.set_selected(selected)
