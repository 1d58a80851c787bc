from __future__ import annotations

from datetime import date

from PySide6.QtCore import QDate, Qt, Signal
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDateEdit,
    QFormLayout,
    QFrame,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from command_board.domain.entities import RecurrenceRule, TaskEntity
from command_board.domain.enums import (
    PRIORITY_LABELS,
    STATUS_LABELS,
    Priority,
    RecurrencePattern,
    RecurrenceScope,
    TaskType,
)
from command_board.domain.formatting import format_recurrence

from .widgets import WeekdayPicker

PATTERN_LABELS = {
    RecurrencePattern.WEEKLY: "Weekly",
    RecurrencePattern.BIWEEKLY: "Every 2 weeks",
    RecurrencePattern.MONTHLY: "Monthly",
    RecurrencePattern.QUARTERLY: "Quarterly",
    RecurrencePattern.YEARLY: "Yearly",
    RecurrencePattern.BUSINESS_DAYS: "Business days",
    RecurrencePattern.NTH_WEEKDAY: "Nth weekday",
}

# Which optional rule fields each pattern uses.
PATTERN_FIELDS = {
    RecurrencePattern.WEEKLY: {"weekdays"},
    RecurrencePattern.BIWEEKLY: {"weekdays"},
    RecurrencePattern.MONTHLY: {"day_of_month"},
    RecurrencePattern.QUARTERLY: {"day_of_month"},
    RecurrencePattern.YEARLY: set(),
    RecurrencePattern.BUSINESS_DAYS: {"interval"},
    RecurrencePattern.NTH_WEEKDAY: {"weekdays", "nth_week", "scope"},
}


def _split_names(value: str) -> tuple[str, ...]:
    return tuple(dict.fromkeys(part.strip() for part in value.split(",") if part.strip()))


def _set_combo(combo: QComboBox, value) -> None:
    index = combo.findData(value)
    if index >= 0:
        combo.setCurrentIndex(index)


def _to_qdate(day: date) -> QDate:
    return QDate(day.year, day.month, day.day)


class RecurrenceEditor(QGroupBox):
    """Pattern picker plus the fields that pattern needs and a live label."""

    changed = Signal()

    def __init__(self, parent=None):
        super().__init__("Recurrence", parent)

        self.pattern = QComboBox()
        for pattern, label in PATTERN_LABELS.items():
            self.pattern.addItem(label, pattern)

        self.weekdays = WeekdayPicker()
        self.interval = QSpinBox()
        self.interval.setRange(1, 30)
        self.interval.setSuffix(" business day(s)")
        self.nth_week = QSpinBox()
        self.nth_week.setRange(1, 53)
        self.day_of_month = QSpinBox()
        self.day_of_month.setRange(1, 31)
        self.scope = QComboBox()
        for scope in RecurrenceScope:
            self.scope.addItem(f"of {scope.value}", scope)

        self.summary = QLabel()
        self.summary.setProperty("class", "task-meta")

        self._form = QFormLayout(self)
        self._form.addRow("Repeats", self.pattern)
        self._form.addRow("On", self.weekdays)
        self._form.addRow("Every", self.interval)
        self._form.addRow("Occurrence", self.nth_week)
        self._form.addRow("Scope", self.scope)
        self._form.addRow("Day", self.day_of_month)
        self._form.addRow(self.summary)
        self._rows = {
            "weekdays": self.weekdays,
            "interval": self.interval,
            "nth_week": self.nth_week,
            "scope": self.scope,
            "day_of_month": self.day_of_month,
        }

        self.pattern.currentIndexChanged.connect(self._on_pattern_changed)
        self.scope.currentIndexChanged.connect(self._emit_changed)
        for spin in (self.interval, self.nth_week, self.day_of_month):
            spin.valueChanged.connect(self._emit_changed)
        for box in self.weekdays.boxes:
            box.toggled.connect(self._emit_changed)
        self._on_pattern_changed()

    def rule(self) -> RecurrenceRule:
        pattern = RecurrencePattern(self.pattern.currentData())
        fields = PATTERN_FIELDS[pattern]
        weekdays = self.weekdays.weekdays() if "weekdays" in fields else ()
        if pattern == RecurrencePattern.NTH_WEEKDAY:
            weekdays = weekdays[:1]
        return RecurrenceRule(
            pattern=pattern,
            weekdays=weekdays,
            interval=self.interval.value() if "interval" in fields else None,
            nth_week=self.nth_week.value() if "nth_week" in fields else None,
            day_of_month=self.day_of_month.value() if "day_of_month" in fields else None,
            scope=RecurrenceScope(self.scope.currentData()) if "scope" in fields else None,
        )

    def set_rule(self, rule: RecurrenceRule | None) -> None:
        rule = rule or RecurrenceRule(pattern=RecurrencePattern.WEEKLY)
        _set_combo(self.pattern, rule.pattern)
        self.weekdays.set_weekdays(rule.weekdays)
        self.interval.setValue(rule.interval or 1)
        self.nth_week.setValue(rule.nth_week or 1)
        self.day_of_month.setValue(rule.day_of_month or 1)
        _set_combo(self.scope, rule.scope or RecurrenceScope.MONTH)
        self._on_pattern_changed()

    def _on_pattern_changed(self) -> None:
        fields = PATTERN_FIELDS[RecurrencePattern(self.pattern.currentData())]
        for name, widget in self._rows.items():
            self._form.setRowVisible(widget, name in fields)
        self._emit_changed()

    def _emit_changed(self) -> None:
        self.summary.setText(format_recurrence(self.rule()))
        self.changed.emit()


class TaskEditor(QFrame):
    saveRequested = Signal()
    completeRequested = Signal()
    endSeriesRequested = Signal()
    deleteRequested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("DetailPanel")

        self.title = QLineEdit()
        self.title.setPlaceholderText("What needs doing?")
        self.notes = QPlainTextEdit()
        self.notes.setPlaceholderText("Notes")
        self.notes.setMaximumHeight(110)

        self.task_type = QComboBox()
        self.task_type.addItem("One-off", TaskType.ONE_OFF)
        self.task_type.addItem("Recurring", TaskType.RECURRING)
        self.status = QComboBox()
        for status, label in STATUS_LABELS.items():
            self.status.addItem(label, status)
        self.priority = QComboBox()
        for priority, label in PRIORITY_LABELS.items():
            self.priority.addItem(label, priority)

        self.labels = QLineEdit()
        self.labels.setPlaceholderText("comma separated")
        self.stakeholders = QLineEdit()
        self.stakeholders.setPlaceholderText("comma separated")
        self.blocker = QLineEdit()

        self.has_due = QCheckBox()
        self.due = QDateEdit()
        self.due.setCalendarPopup(True)
        self.due.setDisplayFormat("yyyy-MM-dd")
        due_row = QHBoxLayout()
        due_row.addWidget(self.has_due)
        due_row.addWidget(self.due, 1)

        self.estimate = QSpinBox()
        self.estimate.setRange(0, 24 * 60)
        self.estimate.setSingleStep(15)
        self.estimate.setSpecialValueText("none")
        self.estimate.setSuffix(" min")

        self.recurrence = RecurrenceEditor()

        form = QFormLayout()
        form.setLabelAlignment(Qt.AlignRight)
        form.addRow("Title", self.title)
        form.addRow("Type", self.task_type)
        form.addRow("Status", self.status)
        form.addRow("Priority", self.priority)
        form.addRow("Due", due_row)
        form.addRow("Estimate", self.estimate)
        form.addRow("Labels", self.labels)
        form.addRow("People", self.stakeholders)
        form.addRow("Blocker", self.blocker)

        self.save_button = QPushButton("Save")
        self.complete_button = QPushButton("Complete")
        self.complete_button.setProperty("variant", "secondary")
        self.end_button = QPushButton("End series")
        self.end_button.setProperty("variant", "ghost")
        self.delete_button = QPushButton("Delete")
        self.delete_button.setProperty("variant", "danger")

        self.save_button.clicked.connect(self.saveRequested)
        self.complete_button.clicked.connect(self.completeRequested)
        self.end_button.clicked.connect(self.endSeriesRequested)
        self.delete_button.clicked.connect(self.deleteRequested)

        buttons = QHBoxLayout()
        for button in (self.save_button, self.complete_button, self.end_button, self.delete_button):
            buttons.addWidget(button)

        heading = QLabel("Details")
        heading.setProperty("class", "panel-title")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.addWidget(heading)
        layout.addLayout(form)
        layout.addWidget(self.notes)
        layout.addWidget(self.recurrence)
        layout.addLayout(buttons)
        layout.addStretch()

        self.has_due.toggled.connect(self.due.setEnabled)
        self.task_type.currentIndexChanged.connect(self._sync_recurrence)
        self.clear()

    def clear(self) -> None:
        for line in (self.title, self.labels, self.stakeholders, self.blocker):
            line.clear()
        self.notes.clear()
        _set_combo(self.task_type, TaskType.ONE_OFF)
        _set_combo(self.status, next(iter(STATUS_LABELS)))
        _set_combo(self.priority, Priority.P2)
        self.has_due.setChecked(False)
        self.due.setEnabled(False)
        self.due.setDate(QDate.currentDate())
        self.estimate.setValue(0)
        self.recurrence.set_rule(None)
        self._sync_buttons(None)
        self._sync_recurrence()

    def load(self, task: TaskEntity) -> None:
        self.title.setText(task.title)
        self.notes.setPlainText(task.notes or "")
        _set_combo(self.task_type, task.type)
        _set_combo(self.status, task.status)
        _set_combo(self.priority, task.priority)
        self.labels.setText(", ".join(task.labels))
        self.stakeholders.setText(", ".join(task.stakeholders))
        self.blocker.setText(task.blocker_reason or "")
        self.has_due.setChecked(task.due_date is not None)
        self.due.setEnabled(task.due_date is not None)
        if task.due_date:
            self.due.setDate(_to_qdate(task.due_date))
        self.estimate.setValue(task.estimated_minutes or 0)
        self.recurrence.set_rule(task.recurrence)
        self._sync_buttons(task)
        self._sync_recurrence()

    def data(self) -> dict:
        recurring = self.task_type.currentData() == TaskType.RECURRING
        return {
            "title": self.title.text().strip(),
            "notes": self.notes.toPlainText().strip() or None,
            "type": self.task_type.currentData(),
            "status": self.status.currentData(),
            "priority": self.priority.currentData(),
            "labels": _split_names(self.labels.text()),
            "stakeholders": _split_names(self.stakeholders.text()),
            "blocker_reason": self.blocker.text().strip() or None,
            "estimated_minutes": self.estimate.value() or None,
            "due_date": self.due.date().toPython() if self.has_due.isChecked() else None,
            "recurrence": self.recurrence.rule() if recurring else None,
        }

    def _sync_recurrence(self) -> None:
        self.recurrence.setVisible(self.task_type.currentData() == TaskType.RECURRING)

    def _sync_buttons(self, task: TaskEntity | None) -> None:
        self.complete_button.setText("Reopen" if task and task.is_done else "Complete")
        self.complete_button.setEnabled(task is not None)
        self.delete_button.setEnabled(task is not None)
        self.end_button.setEnabled(bool(task and task.is_recurring and task.ended_at is None))
