"""
DiaryPlus Backend — Memory and Time Capsule Models
====================================================

Memory: a dated moment worth keeping (place, mood, tags, photo count).
TimeCapsule: a message scheduled for future delivery to an email address.
The time-capsule cron job picks up unsent capsules whose deliver_on date has
arrived and marks them sent.
MemoryCollection: a named album of memories; public collections are listed
for every project member. A memory appears in a collection at most once.
"""

import datetime as dt
import uuid
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
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


class Memory(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "memories"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    memory_date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    location_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    mood: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="1-5")
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    photo_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class TimeCapsule(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "time_capsules"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    subject: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    content_md: Mapped[str] = mapped_column(Text, nullable=False)
    deliver_on: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    target_email: Mapped[str] = mapped_column(String(255), nullable=False)
    sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sent_at: Mapped[Optional[dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class MemoryCollection(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "memory_collections"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    items: Mapped[List["MemoryCollectionItem"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class MemoryCollectionItem(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "memory_collection_items"
    __table_args__ = (UniqueConstraint("collection_id", "memory_id"),)

    collection_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("memory_collections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    memory_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("memories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
