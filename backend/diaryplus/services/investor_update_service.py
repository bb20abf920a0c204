"""
DiaryPlus Backend — Investor Update Service
=============================================

What:  One update per project per month, optionally generated from that
       month's daily logs and the project's active goals, and optionally
       published at /api/public/updates/{public_slug}.

Public pages expose only the update text, its month and the project's name
and slug. Unpublished or unknown slugs are indistinguishable (404).
"""

import calendar
import datetime as dt
import logging
import secrets
import string
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.exceptions import NotFoundError, ValidationError
from diaryplus.models.goal import Goal
from diaryplus.models.investor_update import InvestorUpdate
from diaryplus.models.project import Project
from diaryplus.schemas.investor_update import (
    InvestorUpdateCreate,
    InvestorUpdateListResponse,
    InvestorUpdateResponse,
    InvestorUpdateUpdate,
    PublicInvestorUpdateResponse,
    PublicProject,
)
from diaryplus.services.crud import apply_update
from diaryplus.services.log_service import logs_in_range
from diaryplus.services.project_service import load_scoped, require_membership
from diaryplus.services.summary_service import summary_service

logger = logging.getLogger(__name__)

AUTO_GENERATED_NOTE = "Auto-generated from daily logs and goals"
SLUG_ALPHABET = string.ascii_lowercase + string.digits


def new_public_slug(year: int, month: int) -> str:
    suffix = "".join(secrets.choice(SLUG_ALPHABET) for _ in range(6))
    return f"{year:04d}-{month:02d}-{suffix}"


class InvestorUpdateService:
    async def list_updates(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> InvestorUpdateListResponse:
        await require_membership(db, project_id, user_id)
        result = await db.execute(
            select(InvestorUpdate)
            .where(InvestorUpdate.project_id == project_id)
            .order_by(InvestorUpdate.year.desc(), InvestorUpdate.month.desc())
        )
        return InvestorUpdateListResponse(
            updates=[InvestorUpdateResponse.model_validate(u) for u in result.scalars().all()]
        )

    async def create_update(
        self, db: AsyncSession, user_id: uuid.UUID, body: InvestorUpdateCreate
    ) -> InvestorUpdateResponse:
        await require_membership(db, body.project_id, user_id)

        existing = await db.execute(
            select(InvestorUpdate.id).where(
                InvestorUpdate.project_id == body.project_id,
                InvestorUpdate.month == body.month,
                InvestorUpdate.year == body.year,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ValidationError(message="Investor update for this month already exists", field="month")

        content_md = body.content_md
        ai_summary = None
        if not content_md or not content_md.strip():
            first = dt.date(body.year, body.month, 1)
            last = dt.date(body.year, body.month, calendar.monthrange(body.year, body.month)[1])
            logs = await logs_in_range(db, body.project_id, first, last)
            goals = await db.execute(
                select(Goal).where(Goal.project_id == body.project_id, Goal.status == "active")
            )
            content_md = await summary_service.investor_update(
                logs, list(goals.scalars().all()), body.month, body.year
            )
            ai_summary = AUTO_GENERATED_NOTE

        update = InvestorUpdate(
            project_id=body.project_id,
            user_id=user_id,
            month=body.month,
            year=body.year,
            content_md=content_md,
            ai_summary=ai_summary,
            public_slug=new_public_slug(body.year, body.month),
            is_public=False,
        )
        db.add(update)
        await db.flush()
        logger.info("Investor update %s created for %04d-%02d", update.id, body.year, body.month)
        return InvestorUpdateResponse.model_validate(update)

    async def update_update(
        self, db: AsyncSession, update_id: uuid.UUID, user_id: uuid.UUID, body: InvestorUpdateUpdate
    ) -> InvestorUpdateResponse:
        update = await load_scoped(db, InvestorUpdate, update_id, user_id, "investor update")
        changes = apply_update(update, body)
        await db.flush()
        if "is_public" in changes:
            logger.info("Investor update %s public=%s", update.id, update.is_public)
        return InvestorUpdateResponse.model_validate(update)

    async def delete_update(self, db: AsyncSession, update_id: uuid.UUID, user_id: uuid.UUID) -> None:
        update = await load_scoped(db, InvestorUpdate, update_id, user_id, "investor update")
        await db.delete(update)
        await db.flush()

    async def get_public(self, db: AsyncSession, slug: str) -> PublicInvestorUpdateResponse:
        result = await db.execute(
            select(InvestorUpdate, Project)
            .join(Project, Project.id == InvestorUpdate.project_id)
            .where(InvestorUpdate.public_slug == slug, InvestorUpdate.is_public.is_(True))
        )
        row = result.first()
        if row is None:
            raise NotFoundError(resource="update")
        update, project = row
        return PublicInvestorUpdateResponse(
            id=update.id,
            month=update.month,
            year=update.year,
            content_md=update.content_md,
            ai_summary=update.ai_summary,
            created_at=update.created_at,
            project=PublicProject(name=project.name, slug=project.slug),
        )


investor_update_service = InvestorUpdateService()
