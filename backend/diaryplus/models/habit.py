"""
DiaryPlus Backend — Habit Models
==================================

Habit: a recurring behavior with a weekly target (1-7 days).
HabitLog: one row per habit per day. (habit_id, date) is unique, so logging
the same day twice updates the existing row instead of double-counting the
streak.
"""

import uuid
import datetime as dt
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin


class Habit(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "habits"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    schedule: Mapped[str] = mapped_column(String(50), nullable=False, default="daily")
    target_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    area_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("life_areas.id", ondelete="SET NULL"),
        nullable=True,
    )
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#10B981")
    icon: Mapped[str] = mapped_column(String(16), nullable=False, default="✅")
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class HabitLog(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "habit_logs"
    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_habit_logs_habit_date"),
    )

    habit_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("habits.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
