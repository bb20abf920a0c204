"""
DiaryPlus Backend — Daily Log and Weekly Review Models
========================================================

Daily logs are the founder's work journal (what was done, mood, time spent).
Weekly reviews are summaries of a date range of logs, written either by the
AI summary service or by the built-in markdown fallback.
"""

import datetime as dt
from typing import List, Optional

from sqlalchemy import JSON, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin


class DailyLog(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "daily_logs"

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content_md: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    mood: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="1-5")
    time_spent_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class WeeklyReview(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "weekly_reviews"

    week_start: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    week_end: Mapped[dt.date] = mapped_column(Date, nullable=False)
    content_md: Mapped[str] = mapped_column(Text, nullable=False)
    ai_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
