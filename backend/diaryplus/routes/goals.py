"""
Goal (OKR) routes: /api/goals and /api/key-results/{id}.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.goal import (
    GoalCreate,
    GoalListResponse,
    GoalResponse,
    GoalUpdate,
    KeyResultResponse,
    KeyResultUpdate,
)
from diaryplus.services.goal_service import goal_service

router = APIRouter(prefix="/api", tags=["Goals"])


@router.get("/goals", response_model=GoalListResponse, summary="Goals with their key results")
async def list_goals(
    project_id: UUID = Depends(require_project_id),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> GoalListResponse:
    return await goal_service.list_goals(db, project_id, user.id)


@router.post("/goals", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    body: GoalCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> GoalResponse:
    return await goal_service.create_goal(db, user.id, body)


@router.patch("/goals/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: UUID,
    body: GoalUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> GoalResponse:
    return await goal_service.update_goal(db, goal_id, user.id, body)


@router.delete("/goals/{goal_id}", response_model=MessageResponse, summary="Delete a goal and its key results")
async def delete_goal(
    goal_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await goal_service.delete_goal(db, goal_id, user.id)
    return MessageResponse(message="Goal deleted")


@router.patch(
    "/key-results/{key_result_id}",
    response_model=KeyResultResponse,
    responses={403: {"description": "Only the goal's author may update progress", "model": ErrorResponse}},
    summary="Record progress on a key result",
)
async def update_key_result(
    key_result_id: UUID,
    body: KeyResultUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> KeyResultResponse:
    return await goal_service.update_key_result(db, key_result_id, user.id, body)
