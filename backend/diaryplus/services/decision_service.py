"""
DiaryPlus Backend — Decision (ADR) Service
============================================

Architectural Decision Records: context, options, the decision and its
consequences, linked to related decisions by id.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.models.decision import Decision
from diaryplus.schemas.decision import (
    DecisionCreate,
    DecisionListResponse,
    DecisionResponse,
    DecisionUpdate,
)
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)


class DecisionService:
    async def list_decisions(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        status: Optional[str] = None,
    ) -> DecisionListResponse:
        await require_membership(db, project_id, user_id)
        query = select(Decision).where(Decision.project_id == project_id)
        if status:
            query = query.where(Decision.status == status)
        result = await db.execute(query.order_by(Decision.created_at.desc()))
        return DecisionListResponse(
            decisions=[DecisionResponse.model_validate(d) for d in result.scalars().all()]
        )

    async def create_decision(
        self, db: AsyncSession, user_id: uuid.UUID, body: DecisionCreate
    ) -> DecisionResponse:
        await require_membership(db, body.project_id, user_id)
        decision = Decision(
            project_id=body.project_id,
            user_id=user_id,
            title=body.title,
            context_md=body.context_md,
            options_md=body.options_md,
            decision_md=body.decision_md,
            consequences_md=body.consequences_md,
            relates_to=[str(i) for i in body.relates_to],
            status=body.status,
        )
        db.add(decision)
        await db.flush()
        logger.info("Decision %s recorded (%s)", decision.id, decision.status)
        return DecisionResponse.model_validate(decision)

    async def get_decision(
        self, db: AsyncSession, decision_id: uuid.UUID, user_id: uuid.UUID
    ) -> DecisionResponse:
        decision = await load_scoped(db, Decision, decision_id, user_id, "decision")
        return DecisionResponse.model_validate(decision)

    async def update_decision(
        self, db: AsyncSession, decision_id: uuid.UUID, user_id: uuid.UUID, body: DecisionUpdate
    ) -> DecisionResponse:
        decision = await load_scoped(db, Decision, decision_id, user_id, "decision")
        changes = body.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if value is None:
                continue
            if field == "relates_to":
                value = [str(i) for i in value]
            setattr(decision, field, value)
        await db.flush()
        return DecisionResponse.model_validate(decision)

    async def delete_decision(self, db: AsyncSession, decision_id: uuid.UUID, user_id: uuid.UUID) -> None:
        decision = await load_scoped(db, Decision, decision_id, user_id, "decision")
        await db.delete(decision)
        await db.flush()


decision_service = DecisionService()
