"""
Flashcard routes: /api/flashcards, the SM-2 review call and card generation
from reading highlights.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user, require_project_id
from diaryplus.models.user import User
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.flashcard import (
    FlashcardCreate,
    FlashcardListResponse,
    FlashcardResponse,
    FlashcardReviewRequest,
)
from diaryplus.schemas.learning import (
    FlashcardsFromHighlightsRequest,
    FlashcardsFromHighlightsResponse,
)
from diaryplus.services.learning_service import learning_service

router = APIRouter(prefix="/api/flashcards", tags=["Learning"])


@router.get("", response_model=FlashcardListResponse, summary="Cards plus deck statistics")
async def list_cards(
    project_id: UUID = Depends(require_project_id),
    deck: Optional[str] = Query(default=None, max_length=100),
    due: bool = Query(default=False, description="Only cards due for review"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FlashcardListResponse:
    return await learning_service.list_cards(db, project_id, user.id, deck, due)


@router.post("", response_model=FlashcardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    body: FlashcardCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FlashcardResponse:
    return await learning_service.create_card(db, user.id, body)


@router.post(
    "/from-highlights",
    response_model=FlashcardsFromHighlightsResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "No highlights to convert", "model": ErrorResponse}},
    summary="Turn the caller's highlights of an item into cards",
)
async def cards_from_highlights(
    body: FlashcardsFromHighlightsRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FlashcardsFromHighlightsResponse:
    return await learning_service.cards_from_highlights(db, user.id, body)


@router.delete("/{card_id}", response_model=MessageResponse)
async def delete_card(
    card_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await learning_service.delete_card(db, card_id, user.id)
    return MessageResponse(message="Flashcard deleted")


@router.post(
    "/{card_id}/review",
    response_model=FlashcardResponse,
    summary="Grade a review (0-5) and reschedule the card",
)
async def review_card(
    card_id: UUID,
    body: FlashcardReviewRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FlashcardResponse:
    return await learning_service.review_card(db, card_id, user.id, body)
