"""
DiaryPlus Backend — Daily Log and Weekly Review Service
=========================================================

What:  Founder daily logs and the weekly reviews summarized from them.

Scoping:
    - Listing shows every member's logs in the project.
    - Editing and deleting are limited to the author; another member's log
      is reported as not found.
    - A weekly review covers every log of the project in [from, to].
"""

import datetime as dt
import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.models.daily_log import DailyLog, WeeklyReview
from diaryplus.schemas.daily_log import (
    DailyLogCreate,
    DailyLogListResponse,
    DailyLogResponse,
    DailyLogUpdate,
    WeeklyReviewListResponse,
    WeeklyReviewRequest,
    WeeklyReviewResponse,
)
from diaryplus.services.crud import apply_update
from diaryplus.services.project_service import load_scoped, require_membership
from diaryplus.services.summary_service import summary_service

logger = logging.getLogger(__name__)


async def logs_in_range(
    db: AsyncSession,
    project_id: uuid.UUID,
    from_date: Optional[dt.date],
    to_date: Optional[dt.date],
    newest_first: bool = False,
) -> List[DailyLog]:
    query = select(DailyLog).where(DailyLog.project_id == project_id)
    if from_date:
        query = query.where(DailyLog.date >= from_date)
    if to_date:
        query = query.where(DailyLog.date <= to_date)
    if newest_first:
        query = query.order_by(DailyLog.date.desc(), DailyLog.created_at.desc())
    else:
        query = query.order_by(DailyLog.date, DailyLog.created_at)
    result = await db.execute(query)
    return list(result.scalars().all())


class LogService:
    # ── Daily logs ────────────────────────────────────────────────────────

    async def list_logs(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        from_date: Optional[dt.date] = None,
        to_date: Optional[dt.date] = None,
    ) -> DailyLogListResponse:
        await require_membership(db, project_id, user_id)
        logs = await logs_in_range(db, project_id, from_date, to_date, newest_first=True)
        return DailyLogListResponse(logs=[DailyLogResponse.model_validate(log) for log in logs])

    async def create_log(
        self, db: AsyncSession, user_id: uuid.UUID, body: DailyLogCreate
    ) -> DailyLogResponse:
        await require_membership(db, body.project_id, user_id)
        log = DailyLog(
            project_id=body.project_id,
            user_id=user_id,
            date=body.date,
            title=body.title,
            content_md=body.content_md,
            tags=body.tags or [],
            mood=body.mood,
            time_spent_minutes=body.time_spent_minutes,
        )
        db.add(log)
        await db.flush()
        logger.info("Daily log %s created for %s", log.id, log.date)
        return DailyLogResponse.model_validate(log)

    async def update_log(
        self, db: AsyncSession, log_id: uuid.UUID, user_id: uuid.UUID, body: DailyLogUpdate
    ) -> DailyLogResponse:
        log = await load_scoped(db, DailyLog, log_id, user_id, "log", author_only=True)
        apply_update(log, body)
        await db.flush()
        return DailyLogResponse.model_validate(log)

    async def delete_log(self, db: AsyncSession, log_id: uuid.UUID, user_id: uuid.UUID) -> None:
        log = await load_scoped(db, DailyLog, log_id, user_id, "log", author_only=True)
        await db.delete(log)
        await db.flush()

    # ── Weekly reviews ────────────────────────────────────────────────────

    async def create_weekly_review(
        self, db: AsyncSession, user_id: uuid.UUID, body: WeeklyReviewRequest
    ) -> WeeklyReviewResponse:
        await require_membership(db, body.project_id, user_id)
        logs = await logs_in_range(db, body.project_id, body.from_date, body.to_date)
        summary = await summary_service.weekly_review(logs)

        review = WeeklyReview(
            project_id=body.project_id,
            user_id=user_id,
            week_start=body.from_date,
            week_end=body.to_date,
            content_md=summary,
            ai_summary=summary,
        )
        db.add(review)
        await db.flush()
        logger.info(
            "Weekly review %s created from %d logs (%s to %s)",
            review.id,
            len(logs),
            body.from_date,
            body.to_date,
        )
        return WeeklyReviewResponse.model_validate(review)

    async def list_weekly_reviews(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> WeeklyReviewListResponse:
        await require_membership(db, project_id, user_id)
        result = await db.execute(
            select(WeeklyReview)
            .where(WeeklyReview.project_id == project_id)
            .order_by(WeeklyReview.week_start.desc(), WeeklyReview.created_at.desc())
        )
        return WeeklyReviewListResponse(
            reviews=[WeeklyReviewResponse.model_validate(r) for r in result.scalars().all()]
        )

    async def get_weekly_review(
        self, db: AsyncSession, review_id: uuid.UUID, user_id: uuid.UUID
    ) -> WeeklyReviewResponse:
        review = await load_scoped(db, WeeklyReview, review_id, user_id, "weekly review")
        return WeeklyReviewResponse.model_validate(review)

    async def delete_weekly_review(
        self, db: AsyncSession, review_id: uuid.UUID, user_id: uuid.UUID
    ) -> None:
        review = await load_scoped(db, WeeklyReview, review_id, user_id, "weekly review")
        await db.delete(review)
        await db.flush()


log_service = LogService()
