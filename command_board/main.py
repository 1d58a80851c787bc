from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory
from sqlalchemy.exc import SQLAlchemyError

from command_board.config import PROJECT_ROOT
from command_board.infra.db import init_db
from command_board.infra.logging import setup_logging
from command_board.ui.main_window import MainWindow

logger = logging.getLogger(__name__)

DARK_PALETTE = {
    QPalette.Window: "#0F172A",
    QPalette.WindowText: "#E6EDF3",
    QPalette.Base: "#111827",
    QPalette.AlternateBase: "#1B2230",
    QPalette.Text: "#E6EDF3",
    QPalette.Button: "#202A3B",
    QPalette.ButtonText: "#E6EDF3",
    QPalette.Highlight: "#2563EB",
    QPalette.HighlightedText: "#FFFFFF",
}


def _apply_dark_palette(app: QApplication) -> None:
    palette = QPalette()
    for role, color in DARK_PALETTE.items():
        palette.setColor(role, QColor(color))
    app.setPalette(palette)


def _find_qss_path() -> Path | None:
    candidates = [
        Path(__file__).resolve().parent / "ui" / "styles.qss",
        PROJECT_ROOT / "styles.qss",
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


def load_styles(app: QApplication) -> None:
    qss_path = _find_qss_path()
    if qss_path:
        app.setStyleSheet(qss_path.read_text(encoding="utf-8"))


def main() -> None:
    setup_logging()
    try:
        init_db()
    except SQLAlchemyError as exc:
        logger.exception("Database initialisation failed")
        app = QApplication(sys.argv)
        QMessageBox.critical(None, "DB error", str(exc))
        return

    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))
    _apply_dark_palette(app)
    app.setFont(QFont("Segoe UI", 10))
    load_styles(app)

    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
