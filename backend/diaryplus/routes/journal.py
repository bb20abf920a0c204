"""
DiaryPlus Backend — Journal Entry Routes
==========================================

What:  /api/personal/entries, the caller's private journal.
Who:   The journal pages and the yearbook picker.

Pagination:
    limit/offset, with the total number of matching entries returned both
    in the body (total_count) and in the X-Total-Count header.
"""

import datetime as dt
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.journal import (
    JournalEntryCreate,
    JournalEntryListResponse,
    JournalEntryResponse,
    JournalEntryUpdate,
)
from diaryplus.services.journal_service import journal_service

router = APIRouter(prefix="/api/personal/entries", tags=["Journal"])

NOT_FOUND = {404: {"description": "Entry not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=JournalEntryListResponse,
    summary="List the caller's journal entries",
    description="Newest entry_date first. Filters combine with AND.",
)
async def list_entries(
    response: Response,
    project_id: UUID = Depends(require_project_id),
    life_area_id: Optional[UUID] = Query(default=None, alias="lifeAreaId"),
    entry_type: Optional[str] = Query(default=None, alias="entryType"),
    from_date: Optional[dt.date] = Query(default=None, alias="from"),
    to_date: Optional[dt.date] = Query(default=None, alias="to"),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> JournalEntryListResponse:
    result = await journal_service.list_entries(
        db,
        project_id,
        user.id,
        life_area_id=life_area_id,
        entry_type=entry_type,
        from_date=from_date,
        to_date=to_date,
        limit=limit,
        offset=offset,
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.post("", response_model=JournalEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: JournalEntryCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> JournalEntryResponse:
    return await journal_service.create_entry(db, user.id, body)


@router.get("/{entry_id}", response_model=JournalEntryResponse, responses=NOT_FOUND)
async def get_entry(
    entry_id: UUID,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> JournalEntryResponse:
    result = await journal_service.get_entry(db, entry_id, user.id)
    # Entries are personal; shared caches must not keep them
    response.headers["Cache-Control"] = "private, no-store"
    return result


@router.patch("/{entry_id}", response_model=JournalEntryResponse, responses=NOT_FOUND)
async def update_entry(
    entry_id: UUID,
    body: JournalEntryUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> JournalEntryResponse:
    return await journal_service.update_entry(db, entry_id, user.id, body)


@router.delete("/{entry_id}", response_model=MessageResponse, responses=NOT_FOUND)
async def delete_entry(
    entry_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await journal_service.delete_entry(db, entry_id, user.id)
    return MessageResponse(message="Entry deleted")
