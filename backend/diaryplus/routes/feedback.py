"""
DiaryPlus Backend — Public Feedback Routes
============================================

What:  The feedback board. Submitting and listing work without an account;
       voting needs one.

Abuse protection:
    Submissions go through `feedback_rate_limit` (per client IP, default 5
    per 15 minutes) on top of the global rate limit middleware.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import feedback_rate_limit, get_current_user, get_optional_user
from diaryplus.middleware.logging import client_ip_of
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse
from diaryplus.schemas.feedback import (
    FeedbackCreate,
    FeedbackListResponse,
    FeedbackResponse,
    FeedbackSort,
    FeedbackType,
    VoteRequest,
    VoteResponse,
)
from diaryplus.services.feedback_service import feedback_service

router = APIRouter(prefix="/api/feedback", tags=["Feedback"])


@router.post(
    "",
    response_model=FeedbackResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(feedback_rate_limit)],
    responses={429: {"description": "Too many submissions from this address", "model": ErrorResponse}},
    summary="Submit feedback (anonymous allowed)",
)
async def submit_feedback(
    body: FeedbackCreate,
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> FeedbackResponse:
    return await feedback_service.submit(
        db,
        body,
        user.id if user else None,
        request.headers.get("user-agent"),
        client_ip_of(request),
    )


@router.get("", response_model=FeedbackListResponse)
async def list_feedback(
    feedback_type: Optional[FeedbackType] = Query(default=None, alias="type"),
    sort: FeedbackSort = Query(default="newest"),
    limit: int = Query(default=50, ge=1, le=200),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> FeedbackListResponse:
    """Each item carries its net vote count and, for signed-in callers, their own vote."""
    return await feedback_service.list_feedback(
        db, user.id if user else None, feedback_type, sort, limit
    )


@router.post(
    "/{feedback_id}/vote",
    response_model=VoteResponse,
    summary="Toggle an up/down vote",
)
async def vote(
    feedback_id: UUID,
    body: VoteRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> VoteResponse:
    return await feedback_service.vote(db, feedback_id, user.id, body)
