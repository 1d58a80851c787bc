from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from command_board.config import SETTINGS


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(SETTINGS.database_url, **_engine_options(SETTINGS.database_url))
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def init_db(bind: Engine | None = None) -> None:
    from . import models  # noqa: F401  registers tables on Base.metadata

    target = bind or engine
    Base.metadata.create_all(target)
    with target.connect() as connection:
        connection.execute(text("SELECT 1"))
