"""
DiaryPlus Backend — Routine Models
====================================

Routine: a named morning/evening sequence of steps with a target duration.
RoutineStep: ordered by order_index; required steps are auto-completed when
the routine is completed.
RoutineLog: one row per routine per day tracking start/completion.

Lifecycle of a day's log:
    (none) ──start──▶ in_progress ──complete──▶ completed
    (none) ──complete──────────────────────────▶ completed
"""

import datetime as dt
import uuid
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin

ROUTINE_TYPES = ("morning", "evening")


class Routine(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "routines"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    target_duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # selectin: async sessions cannot lazy-load, so steps come with every query
    steps: Mapped[List["RoutineStep"]] = relationship(
        back_populates="routine",
        cascade="all, delete-orphan",
        order_by="RoutineStep.order_index",
        lazy="selectin",
    )


class RoutineStep(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "routine_steps"

    routine_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("routines.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    routine: Mapped[Routine] = relationship(back_populates="steps")


class RoutineLog(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "routine_logs"
    __table_args__ = (
        UniqueConstraint("routine_id", "date", name="uq_routine_logs_routine_date"),
    )

    routine_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("routines.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="in_progress")
    started_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    # Step IDs (as strings) ticked off for the day
    completed_steps: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    completion_rate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
