"""
DiaryPlus Backend — Journal Service
=====================================

What:  Personal journal entries. Entries are private to their author even
       inside a shared project: other members get a 404.
Vault: Sealed entries (is_encrypted) hold ciphertext in `content`; their
       content cannot be edited until unsealed through vault_service.
"""

import datetime as dt
import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import utcnow
from diaryplus.exceptions import ValidationError
from diaryplus.models.journal import JournalEntry
from diaryplus.schemas.journal import (
    JournalEntryCreate,
    JournalEntryListResponse,
    JournalEntryResponse,
    JournalEntryUpdate,
)
from diaryplus.services.crud import apply_update
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)


class JournalService:
    async def list_entries(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        life_area_id: Optional[uuid.UUID] = None,
        entry_type: Optional[str] = None,
        from_date: Optional[dt.date] = None,
        to_date: Optional[dt.date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> JournalEntryListResponse:
        await require_membership(db, project_id, user_id)

        conditions = [JournalEntry.project_id == project_id, JournalEntry.user_id == user_id]
        if life_area_id:
            conditions.append(JournalEntry.life_area_id == life_area_id)
        if entry_type:
            conditions.append(JournalEntry.entry_type == entry_type)
        if from_date:
            conditions.append(JournalEntry.entry_date >= from_date)
        if to_date:
            conditions.append(JournalEntry.entry_date <= to_date)

        result = await db.execute(
            select(JournalEntry)
            .where(*conditions)
            .order_by(JournalEntry.entry_date.desc(), JournalEntry.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        total = await db.execute(select(func.count(JournalEntry.id)).where(*conditions))

        return JournalEntryListResponse(
            entries=[JournalEntryResponse.model_validate(e) for e in result.scalars().all()],
            total_count=total.scalar() or 0,
        )

    async def create_entry(
        self, db: AsyncSession, user_id: uuid.UUID, body: JournalEntryCreate
    ) -> JournalEntryResponse:
        await require_membership(db, body.project_id, user_id)
        entry = JournalEntry(
            project_id=body.project_id,
            user_id=user_id,
            life_area_id=body.life_area_id,
            entry_date=body.entry_date or utcnow().date(),
            title=body.title,
            content=body.content,
            mood=body.mood,
            energy_level=body.energy_level,
            gratitude_notes=body.gratitude_notes,
            goals_progress=body.goals_progress,
            tags=body.tags or [],
            is_private=body.is_private,
            entry_type=body.entry_type,
            location_name=body.location_name,
            is_encrypted=False,
        )
        db.add(entry)
        await db.flush()
        logger.info("Journal entry %s created", entry.id)
        return JournalEntryResponse.model_validate(entry)

    async def get_entry(
        self, db: AsyncSession, entry_id: uuid.UUID, user_id: uuid.UUID
    ) -> JournalEntryResponse:
        entry = await load_scoped(db, JournalEntry, entry_id, user_id, "journal entry", author_only=True)
        return JournalEntryResponse.model_validate(entry)

    async def update_entry(
        self, db: AsyncSession, entry_id: uuid.UUID, user_id: uuid.UUID, body: JournalEntryUpdate
    ) -> JournalEntryResponse:
        entry = await load_scoped(db, JournalEntry, entry_id, user_id, "journal entry", author_only=True)
        if entry.is_encrypted and "content" in body.model_fields_set:
            raise ValidationError(message="Unseal the entry before editing its content", field="content")
        apply_update(entry, body)
        await db.flush()
        return JournalEntryResponse.model_validate(entry)

    async def delete_entry(self, db: AsyncSession, entry_id: uuid.UUID, user_id: uuid.UUID) -> None:
        entry = await load_scoped(db, JournalEntry, entry_id, user_id, "journal entry", author_only=True)
        await db.delete(entry)
        await db.flush()


journal_service = JournalService()
