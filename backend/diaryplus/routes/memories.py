"""
DiaryPlus Backend — Memory and Time Capsule Routes
====================================================

What:  /api/memories, /api/memories/collections, /api/memories/time-capsules
       and the scheduler hook /api/cron/time-capsules.
Who:   The memories page; an external scheduler (cron, Cloud Scheduler,
       Vercel cron...) calling the delivery hook once a day with
       `Authorization: Bearer <CRON_SECRET>`.

`/collections` and `/time-capsules` are declared before `/{memory_id}` so
they are not captured as an id.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id, verify_cron_secret
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.memory import (
    CapsuleDeliveryReport,
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
from diaryplus.services.memory_service import memory_service

router = APIRouter(prefix="/api", tags=["Memories"])


@router.get("/memories", response_model=MemoryListResponse)
async def list_memories(
    project_id: UUID = Depends(require_project_id),
    favorite: Optional[bool] = Query(default=None),
    tag: Optional[str] = Query(default=None, max_length=50),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryListResponse:
    return await memory_service.list_memories(db, project_id, user.id, favorite, tag)


@router.post("/memories", response_model=MemoryResponse, status_code=status.HTTP_201_CREATED)
async def create_memory(
    body: MemoryCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryResponse:
    return await memory_service.create_memory(db, user.id, body)


# ── Collections ───────────────────────────────────────────────────────────

@router.get("/memories/collections", response_model=MemoryCollectionListResponse)
async def list_collections(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryCollectionListResponse:
    return await memory_service.list_collections(db, project_id, user.id)


@router.post(
    "/memories/collections",
    response_model=MemoryCollectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_collection(
    body: MemoryCollectionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryCollectionResponse:
    return await memory_service.create_collection(db, user.id, body)


@router.delete("/memories/collections/{collection_id}", response_model=MessageResponse)
async def delete_collection(
    collection_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await memory_service.delete_collection(db, collection_id, user.id)
    return MessageResponse(message="Collection deleted")


@router.post(
    "/memories/collections/{collection_id}/memories",
    response_model=MemoryCollectionResponse,
    responses={
        400: {"description": "Memory not visible in this project", "model": ErrorResponse},
        409: {"description": "Memory already in the collection", "model": ErrorResponse},
    },
)
async def add_to_collection(
    collection_id: UUID,
    body: CollectionMemoryAdd,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryCollectionResponse:
    return await memory_service.add_to_collection(db, collection_id, user.id, body)


@router.delete(
    "/memories/collections/{collection_id}/memories/{memory_id}",
    response_model=MemoryCollectionResponse,
)
async def remove_from_collection(
    collection_id: UUID,
    memory_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryCollectionResponse:
    return await memory_service.remove_from_collection(db, collection_id, memory_id, user.id)


# ── Time capsules ─────────────────────────────────────────────────────────

@router.get("/memories/time-capsules", response_model=TimeCapsuleListResponse)
async def list_capsules(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TimeCapsuleListResponse:
    return await memory_service.list_capsules(db, project_id, user.id)


@router.post(
    "/memories/time-capsules",
    response_model=TimeCapsuleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Delivery date not in the future", "model": ErrorResponse}},
    summary="Schedule a letter to a future date",
)
async def create_capsule(
    body: TimeCapsuleCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TimeCapsuleResponse:
    return await memory_service.create_capsule(db, user.id, body)


@router.get(
    "/cron/time-capsules",
    response_model=CapsuleDeliveryReport,
    dependencies=[Depends(verify_cron_secret)],
    responses={401: {"description": "Missing or wrong scheduler secret", "model": ErrorResponse}},
    summary="Deliver every capsule that is due",
)
async def deliver_time_capsules(
    db: AsyncSession = Depends(get_db_session),
) -> CapsuleDeliveryReport:
    return await memory_service.deliver_due_capsules(db)


# ── Single memory ─────────────────────────────────────────────────────────

@router.get("/memories/{memory_id}", response_model=MemoryResponse)
async def get_memory(
    memory_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryResponse:
    return await memory_service.get_memory(db, memory_id, user.id)


@router.patch("/memories/{memory_id}", response_model=MemoryResponse)
async def update_memory(
    memory_id: UUID,
    body: MemoryUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryResponse:
    return await memory_service.update_memory(db, memory_id, user.id, body)


@router.delete("/memories/{memory_id}", response_model=MessageResponse)
async def delete_memory(
    memory_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await memory_service.delete_memory(db, memory_id, user.id)
    return MessageResponse(message="Memory deleted")
