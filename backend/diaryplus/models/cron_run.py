"""
DiaryPlus Backend — Cron Run Model
====================================

Audit row written by every scheduled job invocation (processed/succeeded
counts and the error message when the run failed).
"""

from typing import Optional

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class CronRun(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "cron_runs"

    job_name: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    processed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    succeeded: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
