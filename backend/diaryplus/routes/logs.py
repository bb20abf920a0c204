"""
DiaryPlus Backend — Daily Log and Weekly Review Routes
========================================================

What:  /api/logs (founder daily logs) and /api/weekly (reviews summarized
       from those logs).

Weekly review generation goes through SummaryService: Gemini when a key is
configured and the circuit is closed, the built-in markdown otherwise. The
request never fails because of the AI provider.
"""

import datetime as dt
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.daily_log import (
    DailyLogCreate,
    DailyLogListResponse,
    DailyLogResponse,
    DailyLogUpdate,
    WeeklyReviewListResponse,
    WeeklyReviewRequest,
    WeeklyReviewResponse,
)
from diaryplus.services.log_service import log_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Daily Logs"])

NOT_FOUND = {404: {"description": "Not found, or another member's log", "model": ErrorResponse}}


@router.get("/logs", response_model=DailyLogListResponse, summary="Project logs, newest first")
async def list_logs(
    project_id: UUID = Depends(require_project_id),
    from_date: Optional[dt.date] = Query(default=None, alias="from"),
    to_date: Optional[dt.date] = Query(default=None, alias="to"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DailyLogListResponse:
    return await log_service.list_logs(db, project_id, user.id, from_date, to_date)


@router.post("/logs", response_model=DailyLogResponse, status_code=status.HTTP_201_CREATED)
async def create_log(
    body: DailyLogCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DailyLogResponse:
    return await log_service.create_log(db, user.id, body)


@router.patch("/logs/{log_id}", response_model=DailyLogResponse, responses=NOT_FOUND)
async def update_log(
    log_id: UUID,
    body: DailyLogUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DailyLogResponse:
    return await log_service.update_log(db, log_id, user.id, body)


@router.delete("/logs/{log_id}", response_model=MessageResponse, responses=NOT_FOUND)
async def delete_log(
    log_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await log_service.delete_log(db, log_id, user.id)
    return MessageResponse(message="Log deleted")


# ── Weekly reviews ────────────────────────────────────────────────────────

@router.post(
    "/weekly/review",
    response_model=WeeklyReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Summarize a date range of logs into a weekly review",
)
async def create_weekly_review(
    body: WeeklyReviewRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> WeeklyReviewResponse:
    return await log_service.create_weekly_review(db, user.id, body)


@router.get("/weekly", response_model=WeeklyReviewListResponse)
async def list_weekly_reviews(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> WeeklyReviewListResponse:
    return await log_service.list_weekly_reviews(db, project_id, user.id)


@router.get("/weekly/{review_id}", response_model=WeeklyReviewResponse)
async def get_weekly_review(
    review_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> WeeklyReviewResponse:
    return await log_service.get_weekly_review(db, review_id, user.id)


@router.delete("/weekly/{review_id}", response_model=MessageResponse)
async def delete_weekly_review(
    review_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await log_service.delete_weekly_review(db, review_id, user.id)
    return MessageResponse(message="Weekly review deleted")
