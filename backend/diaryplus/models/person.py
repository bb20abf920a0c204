"""
DiaryPlus Backend — People (personal CRM) Models
==================================================

Person: someone the user keeps in touch with (birthday, contact details,
importance 1-5).
Interaction: a dated touchpoint (call, text, email, meet, gift, other). The
latest interaction drives "days since last contact".
"""

import datetime as dt
import uuid
from typing import List, Optional

from sqlalchemy import JSON, Date, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin

INTERACTION_TYPES = ("call", "text", "email", "meet", "gift", "other")


class Person(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "people"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    aka: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    birthday: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    notes_md: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    relationship_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    importance: Mapped[int] = mapped_column(Integer, nullable=False, default=3)


class Interaction(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "interactions"

    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("people.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    notes_md: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sentiment: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="1-5")
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
