"""
DiaryPlus Backend — User Model
================================

What:  Account row for email/password sign-in.
Why:   Every project membership and every authored row points back here.

Table Design Rationale:
    - email: stored lower-cased, unique index (login lookup is by email)
    - password_hash: bcrypt hash; the plain password never touches the DB
    - onboarding_completed: flipped by the final onboarding step
    - default_project_id: project chosen during onboarding (no FK so that
      deleting a project never blocks on the user row)
"""

import uuid
from typing import Optional

from sqlalchemy import Boolean, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A person who can sign in and belong to projects."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Lower-cased login email",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash of the password",
    )
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    onboarding_completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    default_project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        comment="Project selected at the end of onboarding",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
