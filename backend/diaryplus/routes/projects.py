"""
DiaryPlus Backend — Project and Invitation Routes
===================================================

What:  Project CRUD for members, invitation management for owners/admins,
       and invitation acceptance by the invited user.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.project import (
    InvitationCreate,
    InvitationListResponse,
    InvitationResponse,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdate,
)
from diaryplus.services.project_service import project_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Projects"])

FORBIDDEN = {403: {"description": "Not a member, or missing role", "model": ErrorResponse}}


@router.get("/projects", response_model=ProjectListResponse, summary="Projects the caller belongs to")
async def list_projects(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectListResponse:
    return await project_service.list_projects(db, user.id)


@router.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project owned by the caller",
)
async def create_project(
    body: ProjectCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.create_project(db, user.id, body)


@router.get("/projects/{project_id}", response_model=ProjectResponse, responses=FORBIDDEN)
async def get_project(
    project_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.get_project(db, project_id, user.id)


@router.patch(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    responses=FORBIDDEN,
    summary="Rename or describe a project (owner/admin)",
)
async def update_project(
    project_id: UUID,
    body: ProjectUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.update_project(db, project_id, user.id, body)


@router.delete(
    "/projects/{project_id}",
    response_model=MessageResponse,
    responses=FORBIDDEN,
    summary="Delete a project and everything it owns (owner)",
)
async def delete_project(
    project_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await project_service.delete_project(db, project_id, user.id)
    return MessageResponse(message="Project deleted")


# ── Invitations ───────────────────────────────────────────────────────────

@router.get(
    "/projects/{project_id}/invitations",
    response_model=InvitationListResponse,
    responses=FORBIDDEN,
)
async def list_invitations(
    project_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> InvitationListResponse:
    return await project_service.list_invitations(db, project_id, user.id)


@router.post(
    "/projects/{project_id}/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
    responses=FORBIDDEN,
    summary="Invite someone by email",
)
async def create_invitation(
    project_id: UUID,
    body: InvitationCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> InvitationResponse:
    return await project_service.create_invitation(db, project_id, user.id, body)


@router.delete(
    "/projects/{project_id}/invitations/{invitation_id}",
    response_model=MessageResponse,
    responses=FORBIDDEN,
)
async def revoke_invitation(
    project_id: UUID,
    invitation_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await project_service.revoke_invitation(db, project_id, invitation_id, user.id)
    return MessageResponse(message="Invitation revoked")


@router.post(
    "/invitations/{token}/accept",
    response_model=ProjectResponse,
    responses={
        400: {"description": "Invitation expired or no longer pending", "model": ErrorResponse},
        403: {"description": "Invitation addressed to another email", "model": ErrorResponse},
        404: {"description": "Unknown invitation", "model": ErrorResponse},
    },
    summary="Join a project through an invitation",
)
async def accept_invitation(
    token: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.accept_invitation(db, token, user)
