"""
DiaryPlus Backend — Investor Update Model
===========================================

One monthly update per project: (project_id, month, year) is unique.
public_slug ("2024-03-k3x9qa") addresses the read-only public page, which
only serves the update while is_public is true.
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin


class InvestorUpdate(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "investor_updates"
    __table_args__ = (
        UniqueConstraint("project_id", "month", "year", name="uq_investor_updates_period"),
    )

    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    content_md: Mapped[str] = mapped_column(Text, nullable=False)
    ai_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    public_slug: Mapped[str] = mapped_column(String(40), nullable=False, unique=True, index=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
