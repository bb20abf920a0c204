"""
DiaryPlus Backend — Decision Record (ADR) Model
=================================================

Architectural Decision Record: context, options considered, the decision and
its consequences. relates_to holds IDs of related decisions (e.g. the one a
superseding record replaces).
"""

from typing import List

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin

DECISION_STATUSES = ("proposed", "accepted", "superseded")


class Decision(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "decisions"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    context_md: Mapped[str] = mapped_column(Text, nullable=False, default="")
    options_md: Mapped[str] = mapped_column(Text, nullable=False, default="")
    decision_md: Mapped[str] = mapped_column(Text, nullable=False, default="")
    consequences_md: Mapped[str] = mapped_column(Text, nullable=False, default="")
    relates_to: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="proposed")
