"""
DiaryPlus Backend — Feedback Models
=====================================

Feedback: a beta-feedback submission (bug, suggestion, feature request...).
Anonymous submissions are allowed, so user_id and project_id are nullable.
The user agent and client IP are kept for abuse triage.

FeedbackVote: one up/down vote per user per feedback item; the unique
constraint is what makes vote toggling safe.
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

FEEDBACK_TYPES = ("suggestion", "bug", "feature_request", "improvement", "other")
VOTE_TYPES = ("up", "down")


class Feedback(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "feedback"

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
    )
    feedback_type: Mapped[str] = mapped_column(String(30), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="submitted")
    tracking_id: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)


class FeedbackVote(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "feedback_votes"
    __table_args__ = (
        UniqueConstraint("feedback_id", "user_id", name="uq_feedback_votes_feedback_user"),
    )

    feedback_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("feedback.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    vote_type: Mapped[str] = mapped_column(String(10), nullable=False)
