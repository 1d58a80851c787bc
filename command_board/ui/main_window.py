from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from PySide6.QtCore import QDate, Qt
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QCalendarWidget,
    QComboBox,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from command_board.config import SETTINGS
from command_board.domain.filters import TaskFilters
from command_board.infra.repository import TaskRepository
from command_board.services.task_service import TaskService

from .dialogs import WeekLoadDialog
from .editor import TaskEditor
from .widgets import TaskList

logger = logging.getLogger(__name__)

VIEWS = {
    "today": "Today",
    "all": "All active",
    "overdue": "Overdue",
    "upcoming": "Upcoming",
    "recurring": "Recurring",
    "someday": "Someday",
    "people": "By person",
    "done": "Completed",
}

SORT_MODES = {
    "priority": "Priority",
    "created": "Newest first",
    "labels": "Label",
}

# Views whose order is the plain manual order, so dragging is meaningful.
REORDERABLE_VIEWS = {"all", "recurring", "someday"}


class MainWindow(QWidget):
    def __init__(self, service: TaskService | None = None):
        super().__init__()
        self.setWindowTitle("Daily Command Board")
        self.resize(1280, 800)

        self.service = service or TaskService(TaskRepository())
        self.view = "today"
        self.due_on: date | None = None
        self.current_task_id: str | None = None

        self.views = QListWidget()
        self.views.setObjectName("FilterList")
        for key, label in VIEWS.items():
            item = QListWidgetItem(label)
            item.setData(Qt.UserRole, key)
            self.views.addItem(item)
        self.views.setCurrentRow(0)
        self.views.currentItemChanged.connect(self._on_view_changed)

        self.calendar = QCalendarWidget()
        self.calendar.setFirstDayOfWeek(Qt.Sunday)
        self.calendar.setVerticalHeaderFormat(QCalendarWidget.NoVerticalHeader)
        self.calendar.clicked.connect(self._on_day_picked)

        self.heading = QLabel()
        self.heading.setProperty("class", "panel-title")
        self.stats = QLabel()
        self.stats.setProperty("class", "stats-badge")
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search title, notes or labels")
        self.search.setClearButtonEnabled(True)
        self.search.textChanged.connect(self.refresh)
        self.sort_by = QComboBox()
        for key, label in SORT_MODES.items():
            self.sort_by.addItem(label, key)
        self.sort_by.setToolTip("Order of the All active view")
        self.sort_by.currentIndexChanged.connect(self.refresh)

        self.task_list = TaskList(on_reorder=self._on_reordered)
        self.task_list.setObjectName("TaskList")
        self.task_list.currentItemChanged.connect(self._on_task_picked)

        self.editor = TaskEditor()
        self.editor.saveRequested.connect(self.save_task)
        self.editor.completeRequested.connect(self.toggle_done)
        self.editor.endSeriesRequested.connect(self.end_series)
        self.editor.deleteRequested.connect(self.delete_task)

        splitter = QSplitter(Qt.Horizontal)
        splitter.addWidget(self._sidebar())
        splitter.addWidget(self._board())
        splitter.addWidget(self.editor)
        splitter.setSizes([240, 620, 420])

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.addWidget(splitter)

        QShortcut(QKeySequence("Ctrl+N"), self, self.new_task)
        QShortcut(QKeySequence("Ctrl+S"), self, self.save_task)
        QShortcut(QKeySequence("Ctrl+Return"), self, self.toggle_done)

        self.refresh()

    def _sidebar(self) -> QWidget:
        any_day = QPushButton("Clear date")
        any_day.setProperty("variant", "secondary")
        any_day.clicked.connect(self._clear_day)
        week = QPushButton("Next week load")
        week.setProperty("variant", "secondary")
        week.clicked.connect(self.show_week_load)

        panel = QFrame()
        panel.setObjectName("Sidebar")
        column = QVBoxLayout(panel)
        for widget in (self._section("Views"), self.views, self._section("Calendar"), self.calendar, any_day, week):
            column.addWidget(widget)
        column.addStretch()
        return panel

    def _board(self) -> QWidget:
        new = QPushButton("New task")
        new.clicked.connect(self.new_task)
        export = QPushButton("Export JSON")
        export.setProperty("variant", "ghost")
        export.clicked.connect(self.export_json)
        restore = QPushButton("Import JSON")
        restore.setProperty("variant", "ghost")
        restore.clicked.connect(self.import_json)

        top = QHBoxLayout()
        top.addWidget(self.heading)
        top.addStretch()
        top.addWidget(self.stats)

        tools = QHBoxLayout()
        tools.addWidget(self.search, 1)
        tools.addWidget(self.sort_by)
        for button in (new, export, restore):
            tools.addWidget(button)

        panel = QFrame()
        panel.setObjectName("CenterPanel")
        column = QVBoxLayout(panel)
        column.addLayout(top)
        column.addLayout(tools)
        column.addWidget(self.task_list)
        return panel

    @staticmethod
    def _section(text: str) -> QLabel:
        label = QLabel(text)
        label.setProperty("class", "sidebar-title")
        return label

    # -- list --------------------------------------------------------------

    def refresh(self) -> None:
        filters = TaskFilters(
            filter_key=self.view,
            search=self.search.text(),
            due_on=self.due_on,
            sort_by=self.sort_by.currentData() or "priority",
        )
        today = self.service.today()
        if self.view == "people" and self.due_on is None:
            self.task_list.populate_groups(self.service.stakeholder_groups(filters), today)
        else:
            self.task_list.populate(self.service.list_tasks(filters), today)

        manual_order = self.view != "all" or filters.sort_by == "priority"
        self.task_list.set_reorder_enabled(
            self.view in REORDERABLE_VIEWS and manual_order and self.due_on is None
        )
        self.sort_by.setEnabled(self.view == "all" and self.due_on is None)

        self.heading.setText(
            self.due_on.strftime("%A, %d %B %Y") if self.due_on else VIEWS[self.view]
        )
        counts = self.service.get_stats()
        self.stats.setText(
            "{total} tasks · {in_progress} in progress · {due_today} today · "
            "{overdue} overdue · {done} done".format(**counts)
        )

        ids = self.task_list.task_ids()
        if self.current_task_id in ids:
            self.task_list.setCurrentRow(self.task_list.row_of(self.current_task_id))
        elif ids:
            self.task_list.setCurrentRow(self.task_list.row_of(ids[0]))
        else:
            self.current_task_id = None
            self.editor.clear()

    def _on_view_changed(self, item: QListWidgetItem | None) -> None:
        if item is None:
            return
        self.view = item.data(Qt.UserRole)
        self.due_on = None
        self.refresh()

    def _on_day_picked(self, picked: QDate) -> None:
        self.due_on = picked.toPython()
        self.refresh()

    def _clear_day(self) -> None:
        self.due_on = None
        self.refresh()

    def _on_task_picked(self, item: QListWidgetItem | None, _previous=None) -> None:
        task = self.task_list.task_at(item)
        if task is None:
            return
        self.current_task_id = task.id
        self.editor.load(task)

    def _on_reordered(self, task_ids: list[str]) -> None:
        self.service.reorder_tasks(task_ids)
        self._changed()

    # -- actions -----------------------------------------------------------

    def new_task(self) -> None:
        self.current_task_id = None
        self.task_list.clearSelection()
        self.editor.clear()
        self.editor.title.setFocus()

    def save_task(self) -> None:
        data = self.editor.data()
        if not data["title"]:
            QMessageBox.warning(self, "Missing title", "Give the task a title first.")
            return

        for name in data["labels"]:
            self.service.add_label(name)
        for name in data["stakeholders"]:
            self.service.add_stakeholder(name)

        if self.current_task_id is None:
            self.current_task_id = self.service.create_task(data).id
        elif self.service.update_task(self.current_task_id, data) is None:
            QMessageBox.warning(self, "Not found", "This task no longer exists.")
            self.current_task_id = None
        self._changed()

    def toggle_done(self) -> None:
        task = self.service.get_task(self.current_task_id) if self.current_task_id else None
        if task is None:
            return
        if task.is_done:
            self.service.uncomplete_task(task.id)
        else:
            self.service.complete_task(task.id)
        self._changed()

    def end_series(self) -> None:
        if self.current_task_id is None:
            return
        answer = QMessageBox.question(
            self,
            "End series",
            "Stop this recurring task after today? Past instances are kept.",
        )
        if answer == QMessageBox.Yes:
            self.service.end_task(self.current_task_id)
            self._changed()

    def delete_task(self) -> None:
        if self.current_task_id is None:
            return
        if QMessageBox.question(self, "Delete", "Delete this task?") != QMessageBox.Yes:
            return
        self.service.delete_task(self.current_task_id)
        self.current_task_id = None
        self._changed()

    def show_week_load(self) -> None:
        WeekLoadDialog(self.service.week_load(), self).exec()

    def export_json(self) -> None:
        target, _ = QFileDialog.getSaveFileName(
            self, "Export board", str(Path.home() / "command-board.json"), "JSON (*.json)"
        )
        if target:
            self.service.export_document(Path(target))

    def import_json(self) -> None:
        source, _ = QFileDialog.getOpenFileName(self, "Import board", str(Path.home()), "JSON (*.json)")
        if not source:
            return
        answer = QMessageBox.question(
            self,
            "Import board",
            "Importing replaces every task, label and stakeholder. Continue?",
        )
        if answer != QMessageBox.Yes:
            return
        try:
            imported = self.service.import_document(Path(source))
        except (OSError, ValueError) as exc:
            logger.warning("Import from %s failed: %s", source, exc)
            QMessageBox.warning(self, "Import failed", str(exc))
            return
        self.current_task_id = None
        self._changed()
        QMessageBox.information(self, "Import board", f"Imported {imported} tasks.")

    def _changed(self) -> None:
        self.refresh()
        if SETTINGS.export_path:
            self.service.export_document(Path(SETTINGS.export_path))
