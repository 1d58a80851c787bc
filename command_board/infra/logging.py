from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from command_board.config import PROJECT_ROOT, SETTINGS

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_FILE_NAME = "command_board.log"


def _log_dir() -> Path:
    configured = Path(SETTINGS.log_dir).expanduser()
    return configured if configured.is_absolute() else PROJECT_ROOT / configured


def setup_logging() -> Path:
    """Send records to a rotating file and the console; returns the file path."""
    log_dir = _log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers: list[logging.Handler] = [
        RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8"),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=SETTINGS.log_level.upper(), handlers=handlers)
    return log_file
