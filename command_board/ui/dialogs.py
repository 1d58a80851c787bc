from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QGridLayout,
    QLabel,
    QProgressBar,
    QVBoxLayout,
)

from command_board.domain.dates import day_of_week
from command_board.domain.entities import DayLoad
from command_board.domain.formatting import FULL_DAY_NAMES, format_minutes

# A bar is full at eight hours of estimated work.
FULL_DAY_MINUTES = 8 * 60


class WeekLoadDialog(QDialog):
    """Estimated minutes and task count for each day of a week."""

    def __init__(self, loads: list[DayLoad], parent=None):
        super().__init__(parent)
        self.setWindowTitle("Next week")
        self.setMinimumWidth(440)

        grid = QGridLayout()
        grid.setHorizontalSpacing(12)
        for row, load in enumerate(loads):
            name = QLabel(f"{FULL_DAY_NAMES[day_of_week(load.day)]} {load.day:%d.%m}")
            bar = QProgressBar()
            bar.setRange(0, FULL_DAY_MINUTES)
            bar.setValue(min(load.total_minutes, FULL_DAY_MINUTES))
            bar.setFormat(format_minutes(load.total_minutes))
            tasks = QLabel(f"{load.task_count} task(s)")
            grid.addWidget(name, row, 0)
            grid.addWidget(bar, row, 1)
            grid.addWidget(tasks, row, 2)
        grid.setColumnStretch(1, 1)

        total = sum(load.total_minutes for load in loads)
        summary = QLabel(f"Planned: {format_minutes(total)}")
        summary.setProperty("class", "section-title")

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addLayout(grid)
        layout.addWidget(summary)
        layout.addWidget(buttons)
