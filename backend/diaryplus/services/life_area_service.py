"""
DiaryPlus Backend — Life Area Service
=======================================

Life areas are project-scoped categories ("Health", "Career") that journal
entries and habits point at. Deleting one only deactivates it so existing
entries keep their reference.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.models.life_area import LifeArea
from diaryplus.schemas.life_area import (
    LifeAreaCreate,
    LifeAreaListResponse,
    LifeAreaResponse,
    LifeAreaUpdate,
)
from diaryplus.services.crud import apply_update
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)


class LifeAreaService:
    async def list_areas(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> LifeAreaListResponse:
        await require_membership(db, project_id, user_id)
        result = await db.execute(
            select(LifeArea)
            .where(LifeArea.project_id == project_id, LifeArea.is_active.is_(True))
            .order_by(LifeArea.sort_order, LifeArea.name)
        )
        return LifeAreaListResponse(
            areas=[LifeAreaResponse.model_validate(a) for a in result.scalars().all()]
        )

    async def create_area(
        self, db: AsyncSession, user_id: uuid.UUID, body: LifeAreaCreate
    ) -> LifeAreaResponse:
        await require_membership(db, body.project_id, user_id)
        area = LifeArea(
            project_id=body.project_id,
            user_id=user_id,
            name=body.name.strip(),
            description=body.description,
            color=body.color,
            icon=body.icon,
            sort_order=body.sort_order,
            is_active=True,
        )
        db.add(area)
        await db.flush()
        return LifeAreaResponse.model_validate(area)

    async def update_area(
        self, db: AsyncSession, area_id: uuid.UUID, user_id: uuid.UUID, body: LifeAreaUpdate
    ) -> LifeAreaResponse:
        area = await load_scoped(db, LifeArea, area_id, user_id, "life area")
        apply_update(area, body)
        await db.flush()
        return LifeAreaResponse.model_validate(area)

    async def delete_area(self, db: AsyncSession, area_id: uuid.UUID, user_id: uuid.UUID) -> None:
        area = await load_scoped(db, LifeArea, area_id, user_id, "life area")
        area.is_active = False
        await db.flush()
        logger.info("Life area %s deactivated", area_id)


life_area_service = LifeAreaService()
