"""
Habit routes: /api/habits and the per-habit check-in log.
"""

import datetime as dt
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import MessageResponse
from diaryplus.schemas.habit import (
    HabitCreate,
    HabitListResponse,
    HabitLogListResponse,
    HabitLogRequest,
    HabitLogResponse,
    HabitResponse,
    HabitUpdate,
)
from diaryplus.services.habit_service import habit_service

router = APIRouter(prefix="/api/habits", tags=["Habits"])


@router.get(
    "",
    response_model=HabitListResponse,
    summary="Habits with streak and weekly completion",
)
async def list_habits(
    project_id: UUID = Depends(require_project_id),
    include_archived: bool = Query(default=False, alias="includeArchived"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> HabitListResponse:
    return await habit_service.list_habits(db, project_id, user.id, include_archived)


@router.post("", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
async def create_habit(
    body: HabitCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> HabitResponse:
    return await habit_service.create_habit(db, user.id, body)


@router.patch("/{habit_id}", response_model=HabitResponse)
async def update_habit(
    habit_id: UUID,
    body: HabitUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> HabitResponse:
    return await habit_service.update_habit(db, habit_id, user.id, body)


@router.delete("/{habit_id}", response_model=MessageResponse)
async def delete_habit(
    habit_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await habit_service.delete_habit(db, habit_id, user.id)
    return MessageResponse(message="Habit deleted")


@router.post(
    "/{habit_id}/log",
    response_model=HabitLogResponse,
    summary="Record (or overwrite) the check-in for one day",
)
async def log_habit(
    habit_id: UUID,
    body: HabitLogRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> HabitLogResponse:
    return await habit_service.log_habit(db, habit_id, user.id, body)


@router.get("/{habit_id}/log", response_model=HabitLogListResponse)
async def list_habit_logs(
    habit_id: UUID,
    from_date: Optional[dt.date] = Query(default=None, alias="from"),
    to_date: Optional[dt.date] = Query(default=None, alias="to"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> HabitLogListResponse:
    return await habit_service.list_habit_logs(db, habit_id, user.id, from_date, to_date)
