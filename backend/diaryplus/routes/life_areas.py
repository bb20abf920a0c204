"""
Life area routes: /api/life-areas.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import MessageResponse
from diaryplus.schemas.life_area import (
    LifeAreaCreate,
    LifeAreaListResponse,
    LifeAreaResponse,
    LifeAreaUpdate,
)
from diaryplus.services.life_area_service import life_area_service

router = APIRouter(prefix="/api/life-areas", tags=["Life Areas"])


@router.get("", response_model=LifeAreaListResponse, summary="Active life areas of a project")
async def list_areas(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> LifeAreaListResponse:
    return await life_area_service.list_areas(db, project_id, user.id)


@router.post("", response_model=LifeAreaResponse, status_code=status.HTTP_201_CREATED)
async def create_area(
    body: LifeAreaCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> LifeAreaResponse:
    return await life_area_service.create_area(db, user.id, body)


@router.patch("/{area_id}", response_model=LifeAreaResponse)
async def update_area(
    area_id: UUID,
    body: LifeAreaUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> LifeAreaResponse:
    return await life_area_service.update_area(db, area_id, user.id, body)


@router.delete("/{area_id}", response_model=MessageResponse, summary="Deactivate a life area")
async def delete_area(
    area_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await life_area_service.delete_area(db, area_id, user.id)
    return MessageResponse(message="Life area deleted")
