"""
DiaryPlus Backend — Project Service (Tenancy and Authorization)
=================================================================

What:  Projects, memberships, invitations and the onboarding endpoints, plus
       the row-level authorization helpers every other service calls.

Authorization model:
    require_membership(project_id, user_id, roles)
        no ProjectMember row         → PermissionDeniedError (403)
        role not in `roles`          → PermissionDeniedError (403)
    load_scoped(model, row_id, user_id)
        row missing                  → NotFoundError (404)
        caller not a project member  → PermissionDeniedError (403)
        author_only and not author   → NotFoundError (404)
"""

import logging
import re
import secrets
import uuid
from datetime import timedelta
from typing import Optional, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.config import settings
from diaryplus.database import as_utc, utcnow
from diaryplus.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from diaryplus.models.project import (
    MANAGER_ROLES,
    Project,
    ProjectInvitation,
    ProjectMember,
)
from diaryplus.models.user import User
from diaryplus.schemas.auth import UserResponse
from diaryplus.schemas.project import (
    InvitationCreate,
    InvitationListResponse,
    InvitationResponse,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

PERSONAL_PROJECT_NAME = "Personal"
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(value: str, max_length: int = 100, fallback: str = "project") -> str:
    """Lower-case, ASCII alphanumerics joined by single hyphens."""
    slug = _NON_SLUG_CHARS.sub("-", value.lower()).strip("-")
    return slug[:max_length].rstrip("-") or fallback


async def unique_slug(db: AsyncSession, name: str) -> str:
    base = slugify(name)
    result = await db.execute(select(Project.slug).where(Project.slug.like(f"{base}%")))
    taken = set(result.scalars().all())
    if base not in taken:
        return base
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


async def require_membership(
    db: AsyncSession,
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    roles: Optional[Sequence[str]] = None,
) -> ProjectMember:
    """Return the caller's membership row or raise 403."""
    result = await db.execute(
        select(ProjectMember).where(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        )
    )
    member = result.scalar_one_or_none()
    if member is None:
        logger.info("User %s denied access to project %s", user_id, project_id)
        raise PermissionDeniedError(message="You are not a member of this project")
    if roles is not None and member.role not in roles:
        raise PermissionDeniedError(
            message=f"This action requires one of the roles: {', '.join(roles)}",
            context={"role": member.role},
        )
    return member


async def load_scoped(
    db: AsyncSession,
    model: Type[ModelT],
    row_id: uuid.UUID,
    user_id: uuid.UUID,
    resource: str,
    author_only: bool = False,
    roles: Optional[Sequence[str]] = None,
) -> ModelT:
    """Load a project-owned row the caller may touch."""
    row = await db.get(model, row_id)
    if row is None:
        raise NotFoundError(resource=resource, resource_id=str(row_id))
    await require_membership(db, row.project_id, user_id, roles)
    if author_only and row.user_id != user_id:
        # Other members' private rows look absent
        raise NotFoundError(resource=resource, resource_id=str(row_id))
    return row


def _project_response(project: Project, role: Optional[str]) -> ProjectResponse:
    response = ProjectResponse.model_validate(project)
    response.role = role
    return response


class ProjectService:
    """Project CRUD, invitations and onboarding."""

    async def list_projects(self, db: AsyncSession, user_id: uuid.UUID) -> ProjectListResponse:
        result = await db.execute(
            select(Project, ProjectMember.role)
            .join(ProjectMember, ProjectMember.project_id == Project.id)
            .where(ProjectMember.user_id == user_id)
            .order_by(Project.is_personal.desc(), Project.created_at)
        )
        return ProjectListResponse(
            projects=[_project_response(project, role) for project, role in result.all()]
        )

    async def create_project(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        body: ProjectCreate,
        is_personal: bool = False,
    ) -> ProjectResponse:
        project = Project(
            name=body.name.strip(),
            slug=await unique_slug(db, body.name),
            description=body.description,
            owner_id=user_id,
            is_personal=is_personal,
            private_vault=False,
        )
        db.add(project)
        await db.flush()
        db.add(ProjectMember(project_id=project.id, user_id=user_id, role="owner"))
        await db.flush()
        logger.info("Project %s (%s) created by %s", project.id, project.slug, user_id)
        return _project_response(project, "owner")

    async def get_project(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> ProjectResponse:
        project = await db.get(Project, project_id)
        if project is None:
            raise NotFoundError(resource="project", resource_id=str(project_id))
        member = await require_membership(db, project_id, user_id)
        return _project_response(project, member.role)

    async def update_project(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        body: ProjectUpdate,
    ) -> ProjectResponse:
        project = await db.get(Project, project_id)
        if project is None:
            raise NotFoundError(resource="project", resource_id=str(project_id))
        member = await require_membership(db, project_id, user_id, MANAGER_ROLES)

        changes = body.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"]:
            project.name = changes["name"].strip()
        if "description" in changes:
            project.description = changes["description"]
        await db.flush()
        return _project_response(project, member.role)

    async def delete_project(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> None:
        project = await db.get(Project, project_id)
        if project is None:
            raise NotFoundError(resource="project", resource_id=str(project_id))
        await require_membership(db, project_id, user_id, ("owner",))
        await db.delete(project)
        await db.flush()
        logger.info("Project %s deleted by %s", project_id, user_id)

    # ── Invitations ───────────────────────────────────────────────────────

    async def list_invitations(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> InvitationListResponse:
        await require_membership(db, project_id, user_id, MANAGER_ROLES)
        result = await db.execute(
            select(ProjectInvitation)
            .where(ProjectInvitation.project_id == project_id)
            .order_by(ProjectInvitation.created_at.desc())
        )
        return InvitationListResponse(
            invitations=[InvitationResponse.model_validate(i) for i in result.scalars().all()]
        )

    async def create_invitation(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        body: InvitationCreate,
    ) -> InvitationResponse:
        member = await require_membership(db, project_id, user_id, MANAGER_ROLES)
        if body.role == "owner" and member.role != "owner":
            raise PermissionDeniedError(message="Only owners can invite other owners")

        invitation = ProjectInvitation(
            project_id=project_id,
            email=body.email,
            role=body.role,
            token=secrets.token_urlsafe(32),
            status="pending",
            invited_by=user_id,
            expires_at=utcnow() + timedelta(days=settings.invitation_expire_days),
        )
        db.add(invitation)
        await db.flush()
        logger.info("Invitation %s to project %s created", invitation.id, project_id)
        return InvitationResponse.model_validate(invitation)

    async def revoke_invitation(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        invitation_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> None:
        await require_membership(db, project_id, user_id, MANAGER_ROLES)
        invitation = await db.get(ProjectInvitation, invitation_id)
        if invitation is None or invitation.project_id != project_id:
            raise NotFoundError(resource="invitation", resource_id=str(invitation_id))
        invitation.status = "revoked"
        await db.flush()

    async def accept_invitation(
        self, db: AsyncSession, token: str, user: User
    ) -> ProjectResponse:
        result = await db.execute(select(ProjectInvitation).where(ProjectInvitation.token == token))
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise NotFoundError(resource="invitation")
        if invitation.email != user.email:
            raise PermissionDeniedError(message="This invitation was sent to a different email address")
        if invitation.status != "pending":
            raise ValidationError(message=f"Invitation is {invitation.status}", field="token")
        if as_utc(invitation.expires_at) < utcnow():
            raise ValidationError(message="Invitation has expired", field="token")

        existing = await db.execute(
            select(ProjectMember).where(
                ProjectMember.project_id == invitation.project_id,
                ProjectMember.user_id == user.id,
            )
        )
        member = existing.scalar_one_or_none()
        if member is None:
            member = ProjectMember(
                project_id=invitation.project_id, user_id=user.id, role=invitation.role
            )
            db.add(member)

        invitation.status = "accepted"
        invitation.accepted_at = utcnow()
        await db.flush()

        project = await db.get(Project, invitation.project_id)
        logger.info("User %s joined project %s as %s", user.id, project.id, member.role)
        return _project_response(project, member.role)

    # ── Onboarding ────────────────────────────────────────────────────────

    async def ensure_personal(self, db: AsyncSession, user: User) -> ProjectResponse:
        result = await db.execute(
            select(Project).where(Project.owner_id == user.id, Project.is_personal.is_(True))
        )
        project = result.scalars().first()
        if project is not None:
            return _project_response(project, "owner")
        return await self.create_project(
            db,
            user.id,
            ProjectCreate(name=PERSONAL_PROJECT_NAME, description="Your personal space"),
            is_personal=True,
        )

    async def complete_onboarding(
        self, db: AsyncSession, user: User, project_id: Optional[uuid.UUID]
    ) -> UserResponse:
        if project_id is not None:
            await require_membership(db, project_id, user.id)
            user.default_project_id = project_id
        user.onboarding_completed = True
        await db.flush()
        logger.info("User %s completed onboarding", user.id)
        return UserResponse.model_validate(user)


project_service = ProjectService()
