"""
DiaryPlus Backend — Goal (OKR) Models
=======================================

Goal: an objective with optional due date.
KeyResult: a measurable target under a goal (name, target, current, unit).
Deleting a goal deletes its key results.
"""

import datetime as dt
import uuid
from typing import List, Optional

from sqlalchemy import Date, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin

GOAL_STATUSES = ("active", "completed", "archived")


class Goal(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "goals"

    objective: Mapped[str] = mapped_column(String(300), nullable=False)
    due_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    key_results: Mapped[List["KeyResult"]] = relationship(
        back_populates="goal",
        cascade="all, delete-orphan",
        order_by="KeyResult.created_at",
        lazy="selectin",
    )


class KeyResult(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "key_results"

    goal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("goals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    target: Mapped[float] = mapped_column(Float, nullable=False)
    current: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    unit: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    goal: Mapped[Goal] = relationship(back_populates="key_results")
