"""
DiaryPlus Backend — Routine Routes
====================================

What:  Morning/evening routines (/api/personal/routines) and their daily
       run log.

`/logs` is declared before `/{routine_id}` so it is not captured as an id.
"""

import datetime as dt
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.routine import (
    RoutineCompleteRequest,
    RoutineCreate,
    RoutineListResponse,
    RoutineLogListResponse,
    RoutineLogResponse,
    RoutineResponse,
    RoutineStartRequest,
    RoutineType,
    RoutineUpdate,
)
from diaryplus.services.routine_service import routine_service

router = APIRouter(prefix="/api/personal/routines", tags=["Routines"])


@router.get("", response_model=RoutineListResponse, summary="Routines with today's status")
async def list_routines(
    project_id: UUID = Depends(require_project_id),
    routine_type: Optional[RoutineType] = Query(default=None, alias="type"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RoutineListResponse:
    return await routine_service.list_routines(db, project_id, user.id, routine_type)


@router.post("", response_model=RoutineResponse, status_code=status.HTTP_201_CREATED)
async def create_routine(
    body: RoutineCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RoutineResponse:
    return await routine_service.create_routine(db, user.id, body)


@router.get("/logs", response_model=RoutineLogListResponse, summary="Routine runs in a date range")
async def list_routine_logs(
    project_id: UUID = Depends(require_project_id),
    from_date: Optional[dt.date] = Query(default=None, alias="from"),
    to_date: Optional[dt.date] = Query(default=None, alias="to"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RoutineLogListResponse:
    return await routine_service.list_logs(db, project_id, user.id, from_date, to_date)


@router.patch("/{routine_id}", response_model=RoutineResponse)
async def update_routine(
    routine_id: UUID,
    body: RoutineUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RoutineResponse:
    return await routine_service.update_routine(db, routine_id, user.id, body)


@router.delete("/{routine_id}", response_model=MessageResponse)
async def delete_routine(
    routine_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await routine_service.delete_routine(db, routine_id, user.id)
    return MessageResponse(message="Routine deleted")


@router.post(
    "/{routine_id}/start",
    response_model=RoutineLogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Already started or completed that day", "model": ErrorResponse}},
)
async def start_routine(
    routine_id: UUID,
    body: Optional[RoutineStartRequest] = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RoutineLogResponse:
    return await routine_service.start_routine(db, routine_id, user.id, body or RoutineStartRequest())


@router.post(
    "/{routine_id}/complete",
    response_model=RoutineLogResponse,
    responses={400: {"description": "Already completed that day", "model": ErrorResponse}},
)
async def complete_routine(
    routine_id: UUID,
    body: Optional[RoutineCompleteRequest] = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RoutineLogResponse:
    """Completes every required step; creates the day's log when it was never started."""
    return await routine_service.complete_routine(
        db, routine_id, user.id, body or RoutineCompleteRequest()
    )
