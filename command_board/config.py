from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

if getattr(sys, "frozen", False):
    PROJECT_ROOT = Path(sys.executable).resolve().parent
else:
    PROJECT_ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    # JSON copy of the board rewritten after every change made in the UI.
    export_path: str | None = None


def _first_existing(name: str) -> Iterator[Path]:
    for base in (Path.cwd(), PROJECT_ROOT):
        candidate = base / name
        if candidate.exists():
            yield candidate
            return


def load_env() -> None:
    """Load ``.env`` and then ``.env.<APP_ENV>``, the latter taking precedence."""
    for path in _first_existing(".env"):
        load_dotenv(path)
    for path in _first_existing(f".env.{os.getenv('APP_ENV', 'development')}"):
        load_dotenv(path, override=True)


def load_settings() -> Settings:
    database_url = os.getenv("DATABASE_URL", "").strip()
    if not database_url:
        raise RuntimeError(
            "DATABASE_URL is not set. Create a .env file, e.g. DATABASE_URL=sqlite:///command_board.db"
        )
    return Settings(
        database_url=database_url,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip() or "INFO",
        log_dir=os.getenv("LOG_DIR", "logs").strip() or "logs",
        export_path=os.getenv("EXPORT_PATH", "").strip() or None,
    )


load_env()
SETTINGS = load_settings()
