"""
DiaryPlus Backend — Habit Service
===================================

What:  Habits, their daily check-ins and the stats shown on each habit card.

Stats (computed from done logs, `today` in UTC):
    current_streak   consecutive done days ending today; 0 until today is
                     checked in
    this_week_count  done days in the last 7 days including today
    completion_rate  this_week_count / target_per_week as a percentage,
                     rounded half up; overshooting the target goes past 100
"""

import datetime as dt
import logging
import uuid
from collections import defaultdict
from typing import Dict, Iterable, Optional, Set, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import utcnow
from diaryplus.models.habit import Habit, HabitLog
from diaryplus.rounding import round_half_up
from diaryplus.schemas.habit import (
    HabitCreate,
    HabitListResponse,
    HabitLogListResponse,
    HabitLogRequest,
    HabitLogResponse,
    HabitResponse,
    HabitUpdate,
)
from diaryplus.services.crud import apply_update
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)


def compute_streak(done_dates: Set[dt.date], today: dt.date) -> int:
    day = today
    streak = 0
    while day in done_dates:
        streak += 1
        day -= dt.timedelta(days=1)
    return streak


def habit_stats(
    done_dates: Iterable[dt.date], today: dt.date, target_per_week: int
) -> Tuple[int, int, int]:
    """Return (current_streak, this_week_count, completion_rate)."""
    dates = set(done_dates)
    week_start = today - dt.timedelta(days=6)
    this_week = sum(1 for d in dates if week_start <= d <= today)
    rate = round_half_up(this_week / target_per_week * 100) if target_per_week else 0
    return compute_streak(dates, today), this_week, rate


def _habit_response(habit: Habit, done_dates: Iterable[dt.date], today: dt.date) -> HabitResponse:
    streak, week_count, rate = habit_stats(done_dates, today, habit.target_per_week)
    response = HabitResponse.model_validate(habit)
    response.current_streak = streak
    response.this_week_count = week_count
    response.completion_rate = rate
    return response


class HabitService:
    async def _done_dates(
        self, db: AsyncSession, habit_ids: Iterable[uuid.UUID]
    ) -> Dict[uuid.UUID, Set[dt.date]]:
        ids = list(habit_ids)
        dates: Dict[uuid.UUID, Set[dt.date]] = defaultdict(set)
        if not ids:
            return dates
        result = await db.execute(
            select(HabitLog.habit_id, HabitLog.date).where(
                HabitLog.habit_id.in_(ids), HabitLog.done.is_(True)
            )
        )
        for habit_id, day in result.all():
            dates[habit_id].add(day)
        return dates

    async def list_habits(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        include_archived: bool = False,
    ) -> HabitListResponse:
        await require_membership(db, project_id, user_id)
        query = select(Habit).where(Habit.project_id == project_id)
        if not include_archived:
            query = query.where(Habit.archived.is_(False))
        result = await db.execute(query.order_by(Habit.created_at))
        habits = list(result.scalars().all())

        done = await self._done_dates(db, (h.id for h in habits))
        today = utcnow().date()
        return HabitListResponse(habits=[_habit_response(h, done[h.id], today) for h in habits])

    async def create_habit(
        self, db: AsyncSession, user_id: uuid.UUID, body: HabitCreate
    ) -> HabitResponse:
        await require_membership(db, body.project_id, user_id)
        habit = Habit(
            project_id=body.project_id,
            user_id=user_id,
            title=body.title,
            description=body.description,
            schedule=body.schedule,
            target_per_week=body.target_per_week,
            area_id=body.area_id,
            color=body.color,
            icon=body.icon,
            archived=False,
        )
        db.add(habit)
        await db.flush()
        return _habit_response(habit, (), utcnow().date())

    async def update_habit(
        self, db: AsyncSession, habit_id: uuid.UUID, user_id: uuid.UUID, body: HabitUpdate
    ) -> HabitResponse:
        habit = await load_scoped(db, Habit, habit_id, user_id, "habit")
        apply_update(habit, body)
        await db.flush()
        done = await self._done_dates(db, [habit.id])
        return _habit_response(habit, done[habit.id], utcnow().date())

    async def delete_habit(self, db: AsyncSession, habit_id: uuid.UUID, user_id: uuid.UUID) -> None:
        habit = await load_scoped(db, Habit, habit_id, user_id, "habit")
        await db.delete(habit)
        await db.flush()

    async def log_habit(
        self, db: AsyncSession, habit_id: uuid.UUID, user_id: uuid.UUID, body: HabitLogRequest
    ) -> HabitLogResponse:
        """Upsert the check-in for (habit, date)."""
        await load_scoped(db, Habit, habit_id, user_id, "habit")
        result = await db.execute(
            select(HabitLog).where(HabitLog.habit_id == habit_id, HabitLog.date == body.date)
        )
        log = result.scalar_one_or_none()
        if log is None:
            log = HabitLog(habit_id=habit_id, user_id=user_id, date=body.date)
            db.add(log)
        log.done = body.done
        log.note = body.note
        await db.flush()
        return HabitLogResponse.model_validate(log)

    async def list_habit_logs(
        self,
        db: AsyncSession,
        habit_id: uuid.UUID,
        user_id: uuid.UUID,
        from_date: Optional[dt.date] = None,
        to_date: Optional[dt.date] = None,
    ) -> HabitLogListResponse:
        await load_scoped(db, Habit, habit_id, user_id, "habit")
        query = select(HabitLog).where(HabitLog.habit_id == habit_id)
        if from_date:
            query = query.where(HabitLog.date >= from_date)
        if to_date:
            query = query.where(HabitLog.date <= to_date)
        result = await db.execute(query.order_by(HabitLog.date))
        return HabitLogListResponse(
            logs=[HabitLogResponse.model_validate(log) for log in result.scalars().all()]
        )


habit_service = HabitService()
