"""
DiaryPlus Backend — People (Personal CRM) Routes
==================================================

What:  Contacts, their interaction history and upcoming birthdays.

`/birthdays` is declared before `/{person_id}` so it is not captured as an id.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import MessageResponse
from diaryplus.schemas.person import (
    BirthdayListResponse,
    InteractionCreate,
    InteractionListResponse,
    InteractionResponse,
    PersonCreate,
    PersonListResponse,
    PersonResponse,
    PersonUpdate,
)
from diaryplus.services.people_service import people_service

router = APIRouter(prefix="/api/people", tags=["People"])


@router.get(
    "",
    response_model=PersonListResponse,
    summary="Search contacts",
    description="`search` matches name, nickname or email (case-insensitive).",
)
async def list_people(
    project_id: UUID = Depends(require_project_id),
    search: Optional[str] = Query(default=None, max_length=100),
    relationship: Optional[str] = Query(default=None, max_length=50),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PersonListResponse:
    return await people_service.list_people(db, project_id, user.id, search, relationship)


@router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
async def create_person(
    body: PersonCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PersonResponse:
    return await people_service.create_person(db, user.id, body)


@router.get("/birthdays", response_model=BirthdayListResponse, summary="Birthdays in the next N days")
async def upcoming_birthdays(
    project_id: UUID = Depends(require_project_id),
    days: int = Query(default=30, ge=1, le=366),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BirthdayListResponse:
    return await people_service.upcoming_birthdays(db, project_id, user.id, days)


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(
    person_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PersonResponse:
    return await people_service.get_person(db, person_id, user.id)


@router.patch("/{person_id}", response_model=PersonResponse)
async def update_person(
    person_id: UUID,
    body: PersonUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PersonResponse:
    return await people_service.update_person(db, person_id, user.id, body)


@router.delete("/{person_id}", response_model=MessageResponse)
async def delete_person(
    person_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await people_service.delete_person(db, person_id, user.id)
    return MessageResponse(message="Person deleted")


@router.get("/{person_id}/interactions", response_model=InteractionListResponse)
async def list_interactions(
    person_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> InteractionListResponse:
    return await people_service.list_interactions(db, person_id, user.id)


@router.post(
    "/{person_id}/interactions",
    response_model=InteractionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_interaction(
    person_id: UUID,
    body: InteractionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> InteractionResponse:
    return await people_service.add_interaction(db, person_id, user.id, body)
