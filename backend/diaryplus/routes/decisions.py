"""
Decision record (ADR) routes: /api/decisions.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import MessageResponse
from diaryplus.schemas.decision import (
    DecisionCreate,
    DecisionListResponse,
    DecisionResponse,
    DecisionStatus,
    DecisionUpdate,
)
from diaryplus.services.decision_service import decision_service

router = APIRouter(prefix="/api/decisions", tags=["Decisions"])


@router.get("", response_model=DecisionListResponse)
async def list_decisions(
    project_id: UUID = Depends(require_project_id),
    decision_status: Optional[DecisionStatus] = Query(default=None, alias="status"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DecisionListResponse:
    return await decision_service.list_decisions(db, project_id, user.id, decision_status)


@router.post("", response_model=DecisionResponse, status_code=status.HTTP_201_CREATED)
async def create_decision(
    body: DecisionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DecisionResponse:
    return await decision_service.create_decision(db, user.id, body)


@router.get("/{decision_id}", response_model=DecisionResponse)
async def get_decision(
    decision_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DecisionResponse:
    return await decision_service.get_decision(db, decision_id, user.id)


@router.patch("/{decision_id}", response_model=DecisionResponse)
async def update_decision(
    decision_id: UUID,
    body: DecisionUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> DecisionResponse:
    return await decision_service.update_decision(db, decision_id, user.id, body)


@router.delete("/{decision_id}", response_model=MessageResponse)
async def delete_decision(
    decision_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await decision_service.delete_decision(db, decision_id, user.id)
    return MessageResponse(message="Decision deleted")
