"""
DiaryPlus Backend — Journal Entry Model
=========================================

What:  Free-form personal entries (daily, weekly, monthly, reflection).
Who:   Written by the journal pages; read by the yearbook generator.

Vault:
    When an entry is sealed, `content` holds the JSON ciphertext envelope
    produced by services/vault_service.py and `is_encrypted` is true.
    Yearbooks skip sealed entries' text.
"""

import uuid
from datetime import date
from typing import List, Optional

from sqlalchemy import JSON, Boolean, Date, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin

ENTRY_TYPES = ("daily", "weekly", "monthly", "reflection")


class JournalEntry(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "personal_entries"

    life_area_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("life_areas.id", ondelete="SET NULL"),
        nullable=True,
    )
    entry_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    mood: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="1-5")
    energy_level: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="1-5")
    gratitude_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    goals_progress: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    entry_type: Mapped[str] = mapped_column(String(20), nullable=False, default="daily")
    location_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    is_encrypted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
