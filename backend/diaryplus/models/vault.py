"""
DiaryPlus Backend — Vault Models
==================================

VaultConfiguration: per (project, user) key-derivation material.
    salt:      hex, 32 random bytes
    key_check: ciphertext of a fixed marker under the derived key; used to
               verify a password without ever storing it
RetentionPolicy: per-project archive/delete horizons for vault content.
"""

import datetime as dt
import uuid
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from diaryplus.models.project import ProjectOwnedMixin


class VaultConfiguration(UUIDPrimaryKeyMixin, ProjectOwnedMixin, TimestampMixin, Base):
    __tablename__ = "vault_configurations"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_vault_configurations_project_user"),
    )

    salt: Mapped[str] = mapped_column(String(64), nullable=False)
    key_check: Mapped[str] = mapped_column(Text, nullable=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    setup_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    password_strength_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class RetentionPolicy(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "retention_policies"

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    delete_after_months: Mapped[int] = mapped_column(Integer, nullable=False, default=18)
    archive_after_months: Mapped[int] = mapped_column(Integer, nullable=False, default=12)
    notify_before_days: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    updated_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
