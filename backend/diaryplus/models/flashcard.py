"""
DiaryPlus Backend — Flashcard Model
=====================================

A front/back card grouped by deck name. Scheduling state follows SM-2:
repetitions (successful reviews in a row), interval (days until next review)
and ease_factor (≥ 1.3, starts at 2.5). See services/learning_service.py.
Cards generated from a highlight keep a link to it (cleared if the
highlight is deleted).
"""

import datetime as dt
import uuid
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin


class Flashcard(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "flashcards"

    front: Mapped[str] = mapped_column(Text, nullable=False)
    back: Mapped[str] = mapped_column(Text, nullable=False)
    deck_name: Mapped[str] = mapped_column(String(100), nullable=False, default="General")
    ease_factor: Mapped[float] = mapped_column(Float, nullable=False, default=2.5)
    interval: Mapped[int] = mapped_column(Integer, nullable=False, default=0, comment="Days")
    repetitions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    next_review: Mapped[Optional[dt.datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    last_reviewed: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    source_highlight_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("highlights.id", ondelete="SET NULL"),
        nullable=True,
    )
