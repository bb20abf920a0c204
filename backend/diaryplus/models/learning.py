"""
DiaryPlus Backend — Learning Item and Highlight Models
========================================================

LearningItem: a book, article, podcast, course, video or paper being
tracked through want_to_read → reading → completed (or paused).
Highlight: a passage kept from an item, with an optional note. Highlights
can be turned into flashcards; deleting an item deletes its highlights.
"""

import datetime as dt
import uuid
from typing import List, Optional

from sqlalchemy import Date, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin

ITEM_KINDS = ("book", "article", "podcast", "course", "video", "paper")
ITEM_STATUSES = ("want_to_read", "reading", "completed", "paused")


class LearningItem(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "learning_items"

    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    source_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    isbn: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="want_to_read")
    rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="1-5")
    started_at: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    finished_at: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    notes_md: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    highlights: Mapped[List["Highlight"]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="Highlight.created_at",
        lazy="selectin",
    )


class Highlight(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "highlights"

    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("learning_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    page_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    item: Mapped[LearningItem] = relationship(back_populates="highlights")
