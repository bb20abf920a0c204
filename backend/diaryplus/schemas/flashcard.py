"""
Flashcard schemas for the spaced-repetition review loop.
"""

import datetime as dt
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest


class FlashcardCreate(ProjectScopedRequest):
    front: str = Field(min_length=1, max_length=1000)
    back: str = Field(min_length=1, max_length=2000)
    deck_name: str = Field(default="General", min_length=1, max_length=100)


class FlashcardReviewRequest(BaseModel):
    rating: int = Field(ge=0, le=5, description="SM-2 quality of recall, 0 (blackout) to 5 (perfect)")


class FlashcardResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    front: str
    back: str
    deck_name: str
    ease_factor: float
    interval: int
    repetitions: int
    next_review: Optional[dt.datetime] = None
    last_reviewed: Optional[dt.datetime] = None
    source_highlight_id: Optional[uuid.UUID] = None
    created_at: dt.datetime


class FlashcardStats(BaseModel):
    total: int = 0
    due: int = 0
    new: int = 0
    learning: int = 0
    mature: int = 0


class FlashcardListResponse(BaseModel):
    cards: List[FlashcardResponse]
    stats: FlashcardStats
