from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Column, Date, DateTime, Integer, String, Text

from .db import Base


def new_id() -> str:
    return str(uuid4())


def now() -> datetime:
    return datetime.now()


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    type = Column(String(20), nullable=False, default="one-off")
    priority = Column(String(4), nullable=False, default="p2")
    status = Column(String(20), nullable=False, default="not-started", index=True)
    created_at = Column(DateTime, nullable=False, default=now)
    due_date = Column(Date, nullable=True, index=True)
    completed_at = Column(DateTime, nullable=True)
    ended_at = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    stakeholders = Column(JSON, nullable=False, default=list)
    labels = Column(JSON, nullable=False, default=list)
    blocker_reason = Column(Text, nullable=True)
    recurrence = Column(JSON, nullable=True)
    # Plain id, not a foreign key: instances never own their series.
    parent_recurring_id = Column(String(36), nullable=True, index=True)
    sort_order = Column(Integer, nullable=False, default=0)
    estimated_minutes = Column(Integer, nullable=True)


class LabelModel(Base):
    __tablename__ = "labels"

    name = Column(String(100), primary_key=True)
    position = Column(Integer, nullable=False, default=0)


class StakeholderModel(Base):
    __tablename__ = "stakeholders"

    name = Column(String(100), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
