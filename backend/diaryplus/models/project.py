"""
DiaryPlus Backend — Project, Membership and Invitation Models
===============================================================

What:  The tenancy layer. A Project (a startup, or the user's "Personal"
       space) owns logs, goals, habits and everything else; ProjectMember
       rows grant access with a role; ProjectInvitation rows are pending
       grants addressed to an email.

Roles:
    owner  → everything, including vault setup, retention and deletion
    admin  → project settings and invitations
    member → read/write project content
    viewer → read/write own content (no role-gated operations)

Row-level authorization:
    Every project-owned table carries project_id. Services resolve the
    caller's ProjectMember row before touching those tables
    (see services/project_service.py).
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from diaryplus.database import Base, TimestampMixin, UUIDPrimaryKeyMixin

PROJECT_ROLES = ("owner", "admin", "member", "viewer")
MANAGER_ROLES = ("owner", "admin")


class ProjectOwnedMixin:
    """
    project_id + user_id columns shared by every project-scoped table.

    user_id is the author; project_id is what the membership check keys on.
    """

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class Project(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A tenant-scoped container of journal data."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # URL-safe, unique; used by public investor update pages
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_personal: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="The auto-created 'Personal' project of a user",
    )
    private_vault: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Set once the owner configures the Private Vault",
    )


class ProjectMember(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Grants a user a role inside a project."""

    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
    )

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="member")


class ProjectInvitation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Pending membership addressed to an email.

    Status: pending → accepted | revoked. Expired invitations stay pending
    in the table but can no longer be accepted.
    """

    __tablename__ = "project_invitations"

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="member")
    token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    invited_by: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
