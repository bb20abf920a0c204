"""
DiaryPlus Backend — Goal (OKR) Service
========================================

Goals are shared with the whole project. Key result progress can only be
moved by the goal's author; other members get a 403.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.exceptions import NotFoundError, PermissionDeniedError
from diaryplus.models.goal import Goal, KeyResult
from diaryplus.schemas.goal import (
    GoalCreate,
    GoalListResponse,
    GoalResponse,
    GoalUpdate,
    KeyResultResponse,
    KeyResultUpdate,
)
from diaryplus.services.crud import apply_update
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)


class GoalService:
    async def list_goals(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> GoalListResponse:
        await require_membership(db, project_id, user_id)
        result = await db.execute(
            select(Goal).where(Goal.project_id == project_id).order_by(Goal.created_at.desc())
        )
        return GoalListResponse(goals=[GoalResponse.model_validate(g) for g in result.scalars().all()])

    async def create_goal(self, db: AsyncSession, user_id: uuid.UUID, body: GoalCreate) -> GoalResponse:
        await require_membership(db, body.project_id, user_id)
        goal = Goal(
            project_id=body.project_id,
            user_id=user_id,
            objective=body.objective,
            due_date=body.due_date,
            status="active",
            key_results=[
                KeyResult(name=kr.name, target=kr.target, current=0, unit=kr.unit)
                for kr in body.key_results
            ],
        )
        db.add(goal)
        await db.flush()
        logger.info("Goal %s created with %d key results", goal.id, len(goal.key_results))
        return GoalResponse.model_validate(goal)

    async def update_goal(
        self, db: AsyncSession, goal_id: uuid.UUID, user_id: uuid.UUID, body: GoalUpdate
    ) -> GoalResponse:
        goal = await load_scoped(db, Goal, goal_id, user_id, "goal")
        apply_update(goal, body)
        await db.flush()
        return GoalResponse.model_validate(goal)

    async def delete_goal(self, db: AsyncSession, goal_id: uuid.UUID, user_id: uuid.UUID) -> None:
        goal = await load_scoped(db, Goal, goal_id, user_id, "goal")
        # key_results cascade through the relationship
        await db.delete(goal)
        await db.flush()

    async def update_key_result(
        self, db: AsyncSession, key_result_id: uuid.UUID, user_id: uuid.UUID, body: KeyResultUpdate
    ) -> KeyResultResponse:
        key_result = await db.get(KeyResult, key_result_id)
        if key_result is None:
            raise NotFoundError(resource="key result", resource_id=str(key_result_id))
        goal = await load_scoped(db, Goal, key_result.goal_id, user_id, "goal")
        if goal.user_id != user_id:
            raise PermissionDeniedError(message="Only the goal's author can update its key results")

        key_result.current = body.current
        await db.flush()
        return KeyResultResponse.model_validate(key_result)


goal_service = GoalService()
