"""
DiaryPlus Backend — Memories and Time Capsules
================================================

What:  Memory records (a dated moment with optional place and mood) and time
       capsules (a letter delivered to an email address on a future date).

Visibility:
    Private memories are visible to their author only; shared ones to every
    project member. Only the author edits or deletes a memory.

Collections:
    Albums of memories. The list shows the caller's own collections plus
    public ones from the project. Only the collection's author adds or
    removes memories, and only memories they can see in the same project.

Delivery:
    GET /api/cron/time-capsules runs `deliver_due_capsules`: every unsent
    capsule with deliver_on <= today goes through the notifier, is marked
    sent, and the run is recorded in cron_runs. One failing capsule does not
    stop the others; it is reported with status "failed" and retried on the
    next run.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import utcnow
from diaryplus.exceptions import ConflictError, NotFoundError, ValidationError
from diaryplus.models.cron_run import CronRun
from diaryplus.models.memory import Memory, MemoryCollection, MemoryCollectionItem, TimeCapsule
from diaryplus.schemas.memory import (
    CapsuleDeliveryReport,
    CapsuleDeliveryResult,
    CollectionMemoryAdd,
    MemoryCollectionCreate,
    MemoryCollectionListResponse,
    MemoryCollectionResponse,
    MemoryCreate,
    MemoryListResponse,
    MemoryResponse,
    MemoryUpdate,
    TimeCapsuleCreate,
    TimeCapsuleListResponse,
    TimeCapsuleResponse,
)
from diaryplus.services.crud import apply_update
from diaryplus.services.project_service import load_scoped, require_membership

logger = logging.getLogger(__name__)

CAPSULE_JOB = "time_capsules"


class LoggingCapsuleNotifier:
    """
    Delivery transport that records the capsule in the application log.

    Swap in a mail-sending notifier with the same `deliver` signature to
    send real email.
    """

    def __init__(self):
        self.logger = logging.getLogger("diaryplus.notifications")

    async def deliver(self, capsule: TimeCapsule) -> bool:
        self.logger.info(
            "Time capsule %s delivered to %s: %s",
            capsule.id,
            capsule.target_email,
            capsule.subject or capsule.title,
        )
        return True


class MemoryService:
    def __init__(self, notifier=None):
        self.notifier = notifier or LoggingCapsuleNotifier()

    # ── Memories ──────────────────────────────────────────────────────────

    async def list_memories(
        self,
        db: AsyncSession,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        favorite: Optional[bool] = None,
        tag: Optional[str] = None,
    ) -> MemoryListResponse:
        await require_membership(db, project_id, user_id)
        query = select(Memory).where(
            Memory.project_id == project_id,
            or_(Memory.user_id == user_id, Memory.is_private.is_(False)),
        )
        if favorite is not None:
            query = query.where(Memory.is_favorite.is_(favorite))
        result = await db.execute(
            query.order_by(Memory.memory_date.desc(), Memory.created_at.desc())
        )
        memories = list(result.scalars().all())
        if tag:
            # JSON containment differs per backend; filter here
            memories = [m for m in memories if tag in (m.tags or [])]
        return MemoryListResponse(memories=[MemoryResponse.model_validate(m) for m in memories])

    async def create_memory(
        self, db: AsyncSession, user_id: uuid.UUID, body: MemoryCreate
    ) -> MemoryResponse:
        await require_membership(db, body.project_id, user_id)
        memory = Memory(
            project_id=body.project_id,
            user_id=user_id,
            title=body.title,
            description=body.description,
            memory_date=body.memory_date,
            location_name=body.location_name,
            latitude=body.latitude,
            longitude=body.longitude,
            mood=body.mood,
            is_favorite=body.is_favorite,
            is_private=body.is_private,
            tags=body.tags or [],
            photo_count=body.photo_count,
        )
        db.add(memory)
        await db.flush()
        return MemoryResponse.model_validate(memory)

    async def get_memory(
        self, db: AsyncSession, memory_id: uuid.UUID, user_id: uuid.UUID
    ) -> MemoryResponse:
        memory = await load_scoped(db, Memory, memory_id, user_id, "memory")
        if memory.is_private and memory.user_id != user_id:
            raise NotFoundError(resource="memory", resource_id=str(memory_id))
        return MemoryResponse.model_validate(memory)

    async def update_memory(
        self, db: AsyncSession, memory_id: uuid.UUID, user_id: uuid.UUID, body: MemoryUpdate
    ) -> MemoryResponse:
        memory = await load_scoped(db, Memory, memory_id, user_id, "memory", author_only=True)
        apply_update(memory, body)
        await db.flush()
        return MemoryResponse.model_validate(memory)

    async def delete_memory(self, db: AsyncSession, memory_id: uuid.UUID, user_id: uuid.UUID) -> None:
        memory = await load_scoped(db, Memory, memory_id, user_id, "memory", author_only=True)
        await db.execute(delete(MemoryCollectionItem).where(MemoryCollectionItem.memory_id == memory.id))
        await db.delete(memory)
        await db.flush()

    # ── Collections ───────────────────────────────────────────────────────

    @staticmethod
    def _collection_response(collection: MemoryCollection) -> MemoryCollectionResponse:
        response = MemoryCollectionResponse.model_validate(collection)
        response.memory_count = len(collection.items)
        return response

    async def list_collections(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> MemoryCollectionListResponse:
        await require_membership(db, project_id, user_id)
        result = await db.execute(
            select(MemoryCollection)
            .where(
                MemoryCollection.project_id == project_id,
                or_(MemoryCollection.user_id == user_id, MemoryCollection.is_public.is_(True)),
            )
            .order_by(MemoryCollection.created_at.desc())
        )
        return MemoryCollectionListResponse(
            collections=[self._collection_response(c) for c in result.scalars().all()]
        )

    async def create_collection(
        self, db: AsyncSession, user_id: uuid.UUID, body: MemoryCollectionCreate
    ) -> MemoryCollectionResponse:
        await require_membership(db, body.project_id, user_id)
        collection = MemoryCollection(
            project_id=body.project_id,
            user_id=user_id,
            name=body.name.strip(),
            description=body.description,
            is_public=body.is_public,
            items=[],
        )
        db.add(collection)
        await db.flush()
        return self._collection_response(collection)

    async def delete_collection(
        self, db: AsyncSession, collection_id: uuid.UUID, user_id: uuid.UUID
    ) -> None:
        collection = await load_scoped(
            db, MemoryCollection, collection_id, user_id, "memory_collection", author_only=True
        )
        await db.delete(collection)
        await db.flush()

    async def add_to_collection(
        self,
        db: AsyncSession,
        collection_id: uuid.UUID,
        user_id: uuid.UUID,
        body: CollectionMemoryAdd,
    ) -> MemoryCollectionResponse:
        collection = await load_scoped(
            db, MemoryCollection, collection_id, user_id, "memory_collection", author_only=True
        )
        memory = await db.get(Memory, body.memory_id)
        if (
            memory is None
            or memory.project_id != collection.project_id
            or (memory.is_private and memory.user_id != user_id)
        ):
            raise ValidationError(message="Memory not found in this project", field="memory_id")
        if any(entry.memory_id == memory.id for entry in collection.items):
            raise ConflictError(message="Memory is already in this collection")

        collection.items.append(MemoryCollectionItem(memory_id=memory.id))
        await db.flush()
        return self._collection_response(collection)

    async def remove_from_collection(
        self,
        db: AsyncSession,
        collection_id: uuid.UUID,
        memory_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> MemoryCollectionResponse:
        collection = await load_scoped(
            db, MemoryCollection, collection_id, user_id, "memory_collection", author_only=True
        )
        entry = next((e for e in collection.items if e.memory_id == memory_id), None)
        if entry is None:
            raise NotFoundError(resource="memory", resource_id=str(memory_id))
        collection.items.remove(entry)
        await db.flush()
        return self._collection_response(collection)

    # ── Time capsules ─────────────────────────────────────────────────────

    async def list_capsules(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> TimeCapsuleListResponse:
        await require_membership(db, project_id, user_id)
        result = await db.execute(
            select(TimeCapsule)
            .where(TimeCapsule.project_id == project_id, TimeCapsule.user_id == user_id)
            .order_by(TimeCapsule.deliver_on)
        )
        return TimeCapsuleListResponse(
            capsules=[TimeCapsuleResponse.model_validate(c) for c in result.scalars().all()]
        )

    async def create_capsule(
        self, db: AsyncSession, user_id: uuid.UUID, body: TimeCapsuleCreate
    ) -> TimeCapsuleResponse:
        await require_membership(db, body.project_id, user_id)
        if body.deliver_on <= utcnow().date():
            raise ValidationError(message="Delivery date must be in the future", field="deliver_on")

        capsule = TimeCapsule(
            project_id=body.project_id,
            user_id=user_id,
            title=body.title,
            subject=body.subject,
            content_md=body.content_md,
            deliver_on=body.deliver_on,
            target_email=body.target_email,
            sent=False,
        )
        db.add(capsule)
        await db.flush()
        logger.info("Time capsule %s scheduled for %s", capsule.id, capsule.deliver_on)
        return TimeCapsuleResponse.model_validate(capsule)

    async def deliver_due_capsules(self, db: AsyncSession) -> CapsuleDeliveryReport:
        today = utcnow().date()
        result = await db.execute(
            select(TimeCapsule)
            .where(TimeCapsule.sent.is_(False), TimeCapsule.deliver_on <= today)
            .order_by(TimeCapsule.deliver_on)
        )
        capsules = list(result.scalars().all())

        results = []
        for capsule in capsules:
            try:
                delivered = await self.notifier.deliver(capsule)
            except Exception as e:
                logger.error("Time capsule %s delivery failed: %s", capsule.id, e, exc_info=True)
                delivered = False
            if delivered:
                capsule.sent = True
                capsule.sent_at = utcnow()
            results.append(
                CapsuleDeliveryResult(
                    capsule_id=capsule.id,
                    target_email=capsule.target_email,
                    title=capsule.title,
                    status="delivered" if delivered else "failed",
                )
            )

        delivered_count = sum(1 for r in results if r.status == "delivered")
        db.add(CronRun(job_name=CAPSULE_JOB, processed=len(results), succeeded=delivered_count))
        await db.flush()
        logger.info("Time capsule run: %d processed, %d delivered", len(results), delivered_count)
        return CapsuleDeliveryReport(processed=len(results), delivered=delivered_count, results=results)


memory_service = MemoryService()
