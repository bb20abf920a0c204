"""
DiaryPlus Backend — Investor Update Routes
============================================

What:  Monthly investor updates for project members, and the public,
       unauthenticated page for published ones.

Caching:
    Public pages are immutable until the author edits them; they are served
    with a short public cache (5 minutes) so edits show up quickly.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.investor_update import (
    InvestorUpdateCreate,
    InvestorUpdateListResponse,
    InvestorUpdateResponse,
    InvestorUpdateUpdate,
    PublicInvestorUpdateResponse,
)
from diaryplus.services.investor_update_service import investor_update_service

router = APIRouter(prefix="/api", tags=["Investor Updates"])


@router.get("/investor-updates", response_model=InvestorUpdateListResponse)
async def list_updates(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> InvestorUpdateListResponse:
    return await investor_update_service.list_updates(db, project_id, user.id)


@router.post(
    "/investor-updates",
    response_model=InvestorUpdateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "An update for this month already exists", "model": ErrorResponse}},
    summary="Create a monthly update",
    description=(
        "When content_md is omitted the update is drafted from the month's daily "
        "logs and the project's active goals."
    ),
)
async def create_update(
    body: InvestorUpdateCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> InvestorUpdateResponse:
    return await investor_update_service.create_update(db, user.id, body)


@router.patch("/investor-updates/{update_id}", response_model=InvestorUpdateResponse)
async def update_update(
    update_id: UUID,
    body: InvestorUpdateUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> InvestorUpdateResponse:
    return await investor_update_service.update_update(db, update_id, user.id, body)


@router.delete("/investor-updates/{update_id}", response_model=MessageResponse)
async def delete_update(
    update_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await investor_update_service.delete_update(db, update_id, user.id)
    return MessageResponse(message="Investor update deleted")


@router.get(
    "/public/updates/{slug}",
    response_model=PublicInvestorUpdateResponse,
    responses={404: {"description": "Unknown or unpublished update", "model": ErrorResponse}},
    tags=["Public"],
    summary="Published investor update (no authentication)",
)
async def get_public_update(
    slug: str,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> PublicInvestorUpdateResponse:
    result = await investor_update_service.get_public(db, slug)
    response.headers["Cache-Control"] = "public, max-age=300"
    return result
