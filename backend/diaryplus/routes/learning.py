"""
Reading list routes: /api/learning/items and /api/learning/highlights.

Items are visible to every project member; only their author edits or
deletes them. Any member may highlight an item.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.exceptions import ValidationError
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.learning import (
    HighlightCreate,
    HighlightListResponse,
    HighlightResponse,
    ItemKind,
    ItemStatus,
    LearningItemCreate,
    LearningItemListResponse,
    LearningItemResponse,
    LearningItemUpdate,
)
from diaryplus.services.learning_service import learning_service

router = APIRouter(prefix="/api/learning", tags=["Learning"])


@router.get("/items", response_model=LearningItemListResponse, summary="Reading list, newest first")
async def list_items(
    project_id: UUID = Depends(require_project_id),
    item_status: Optional[ItemStatus] = Query(default=None, alias="status"),
    kind: Optional[ItemKind] = Query(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> LearningItemListResponse:
    return await learning_service.list_items(db, project_id, user.id, item_status, kind)


@router.post("/items", response_model=LearningItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    body: LearningItemCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> LearningItemResponse:
    return await learning_service.create_item(db, user.id, body)


@router.patch("/items/{item_id}", response_model=LearningItemResponse)
async def update_item(
    item_id: UUID,
    body: LearningItemUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> LearningItemResponse:
    return await learning_service.update_item(db, item_id, user.id, body)


@router.delete("/items/{item_id}", response_model=MessageResponse)
async def delete_item(
    item_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await learning_service.delete_item(db, item_id, user.id)
    return MessageResponse(message="Learning item deleted")


@router.get(
    "/highlights",
    response_model=HighlightListResponse,
    responses={400: {"description": "itemId missing", "model": ErrorResponse}},
    summary="Highlights of one item, oldest first",
)
async def list_highlights(
    item_id: Optional[UUID] = Query(default=None, alias="itemId"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> HighlightListResponse:
    if item_id is None:
        raise ValidationError(message="itemId is required", field="itemId")
    return await learning_service.list_highlights(db, item_id, user.id)


@router.post("/highlights", response_model=HighlightResponse, status_code=status.HTTP_201_CREATED)
async def create_highlight(
    body: HighlightCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> HighlightResponse:
    return await learning_service.create_highlight(db, user.id, body)
