"""
DiaryPlus Backend — Routine Service
=====================================

What:  Morning/evening routines, their ordered steps and one log per
       routine per day.

Routines are personal: they are listed and edited by their author only.

Day log transitions:
    start     no log yet → in_progress (started_at = now); any existing log → 400
    complete  missing → created as completed; in_progress → completed;
              already completed → 400
    On completion every required step is ticked and completion_rate is 100
    when the routine has at least one required step, else 0.
"""

import datetime as dt
import logging
import uuid
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import as_utc, utcnow
from diaryplus.exceptions import ValidationError
from diaryplus.models.routine import Routine, RoutineLog, RoutineStep
from diaryplus.rounding import round_half_up
from diaryplus.schemas.routine import (
    RoutineCompleteRequest,
    RoutineCreate,
    RoutineListResponse,
    RoutineLogListResponse,
    RoutineLogResponse,
    RoutineResponse,
    RoutineStartRequest,
    RoutineStepIn,
    RoutineUpdate,
)
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)


def build_steps(steps: List[RoutineStepIn]) -> List[RoutineStep]:
    """Step order follows list position."""
    return [
        RoutineStep(
            title=step.title,
            description=step.description,
            duration_minutes=step.duration_minutes,
            is_required=step.is_required,
            order_index=index,
        )
        for index, step in enumerate(steps)
    ]


def _routine_response(routine: Routine, today_log: Optional[RoutineLog]) -> RoutineResponse:
    response = RoutineResponse.model_validate(routine)
    if today_log is not None:
        response.today_log = RoutineLogResponse.model_validate(today_log)
    return response


class RoutineService:
    async def _day_log(
        self, db: AsyncSession, routine_id: uuid.UUID, day: dt.date
    ) -> Optional[RoutineLog]:
        result = await db.execute(
            select(RoutineLog).where(RoutineLog.routine_id == routine_id, RoutineLog.date == day)
        )
        return result.scalar_one_or_none()

    async def _load(self, db: AsyncSession, routine_id: uuid.UUID, user_id: uuid.UUID) -> Routine:
        return await load_scoped(db, Routine, routine_id, user_id, "routine", author_only=True)

    async def list_routines(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        routine_type: Optional[str] = None,
    ) -> RoutineListResponse:
        await require_membership(db, project_id, user_id)
        query = select(Routine).where(Routine.project_id == project_id, Routine.user_id == user_id)
        if routine_type:
            query = query.where(Routine.type == routine_type)
        result = await db.execute(query.order_by(Routine.type, Routine.created_at))
        routines = list(result.scalars().all())

        today_logs: Dict[uuid.UUID, RoutineLog] = {}
        if routines:
            logs = await db.execute(
                select(RoutineLog).where(
                    RoutineLog.routine_id.in_([r.id for r in routines]),
                    RoutineLog.date == utcnow().date(),
                )
            )
            today_logs = {log.routine_id: log for log in logs.scalars().all()}

        return RoutineListResponse(
            routines=[_routine_response(r, today_logs.get(r.id)) for r in routines]
        )

    async def create_routine(
        self, db: AsyncSession, user_id: uuid.UUID, body: RoutineCreate
    ) -> RoutineResponse:
        await require_membership(db, body.project_id, user_id)
        routine = Routine(
            project_id=body.project_id,
            user_id=user_id,
            name=body.name,
            type=body.type,
            description=body.description,
            target_duration_minutes=body.target_duration_minutes,
            is_active=True,
            steps=build_steps(body.steps),
        )
        db.add(routine)
        await db.flush()
        logger.info("Routine %s created with %d steps", routine.id, len(routine.steps))
        return _routine_response(routine, None)

    async def update_routine(
        self, db: AsyncSession, routine_id: uuid.UUID, user_id: uuid.UUID, body: RoutineUpdate
    ) -> RoutineResponse:
        routine = await self._load(db, routine_id, user_id)
        changes = body.model_dump(exclude_unset=True, exclude={"steps"})
        for field in ("name", "description", "target_duration_minutes", "is_active"):
            if field in changes and (changes[field] is not None or field == "description"):
                setattr(routine, field, changes[field])
        if body.steps is not None:
            routine.steps = build_steps(body.steps)
        await db.flush()
        return _routine_response(routine, await self._day_log(db, routine.id, utcnow().date()))

    async def delete_routine(self, db: AsyncSession, routine_id: uuid.UUID, user_id: uuid.UUID) -> None:
        routine = await self._load(db, routine_id, user_id)
        await db.delete(routine)
        await db.flush()

    async def start_routine(
        self, db: AsyncSession, routine_id: uuid.UUID, user_id: uuid.UUID, body: RoutineStartRequest
    ) -> RoutineLogResponse:
        routine = await self._load(db, routine_id, user_id)
        day = body.date or utcnow().date()
        if await self._day_log(db, routine.id, day) is not None:
            raise ValidationError(message="Routine already started for this date", field="date")

        log = RoutineLog(
            project_id=routine.project_id,
            user_id=user_id,
            routine_id=routine.id,
            date=day,
            status="in_progress",
            started_at=utcnow(),
            completed_steps=[],
            completion_rate=0,
        )
        db.add(log)
        await db.flush()
        logger.info("Routine %s started for %s", routine.id, day)
        return RoutineLogResponse.model_validate(log)

    async def complete_routine(
        self,
        db: AsyncSession,
        routine_id: uuid.UUID,
        user_id: uuid.UUID,
        body: RoutineCompleteRequest,
    ) -> RoutineLogResponse:
        routine = await self._load(db, routine_id, user_id)
        day = body.date or utcnow().date()
        now = utcnow()

        log = await self._day_log(db, routine.id, day)
        if log is None:
            log = RoutineLog(
                project_id=routine.project_id,
                user_id=user_id,
                routine_id=routine.id,
                date=day,
            )
            db.add(log)
        elif log.status == "completed":
            raise ValidationError(message="Routine already completed for this date", field="date")

        required = [str(step.id) for step in routine.steps if step.is_required]
        log.status = "completed"
        log.completed_at = now
        log.completed_steps = required
        log.completion_rate = 100 if required else 0
        if body.notes is not None:
            log.notes = body.notes
        if body.duration_minutes is not None:
            log.duration_minutes = body.duration_minutes
        elif log.started_at is not None:
            log.duration_minutes = max(0, round_half_up((now - as_utc(log.started_at)).total_seconds() / 60))

        await db.flush()
        logger.info("Routine %s completed for %s", routine.id, day)
        return RoutineLogResponse.model_validate(log)

    async def list_logs(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        from_date: Optional[dt.date] = None,
        to_date: Optional[dt.date] = None,
    ) -> RoutineLogListResponse:
        await require_membership(db, project_id, user_id)
        query = select(RoutineLog).where(
            RoutineLog.project_id == project_id, RoutineLog.user_id == user_id
        )
        if from_date:
            query = query.where(RoutineLog.date >= from_date)
        if to_date:
            query = query.where(RoutineLog.date <= to_date)
        result = await db.execute(query.order_by(RoutineLog.date.desc()))
        return RoutineLogListResponse(
            logs=[RoutineLogResponse.model_validate(log) for log in result.scalars().all()]
        )


routine_service = RoutineService()
