"""
Learning item, highlight and highlight-to-flashcard schemas.
"""

import datetime as dt
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest
from diaryplus.schemas.flashcard import FlashcardResponse

ItemKind = Literal["book", "article", "podcast", "course", "video", "paper"]
ItemStatus = Literal["want_to_read", "reading", "completed", "paused"]

# Status → progress shown on the reading list
READING_PROGRESS = {"completed": 100, "reading": 50, "paused": 25, "want_to_read": 0}


# ── Learning items ────────────────────────────────────────────────────────

class LearningItemCreate(ProjectScopedRequest):
    kind: ItemKind
    title: str = Field(min_length=1, max_length=500)
    author: Optional[str] = Field(default=None, max_length=200)
    source_url: Optional[str] = Field(default=None, max_length=2000, pattern=r"^https?://")
    isbn: Optional[str] = Field(default=None, max_length=20)
    status: ItemStatus = "want_to_read"
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    started_at: Optional[dt.date] = None
    finished_at: Optional[dt.date] = None
    notes_md: Optional[str] = Field(default=None, max_length=50_000)


class LearningItemUpdate(BaseModel):
    kind: Optional[ItemKind] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    author: Optional[str] = Field(default=None, max_length=200)
    source_url: Optional[str] = Field(default=None, max_length=2000, pattern=r"^https?://")
    isbn: Optional[str] = Field(default=None, max_length=20)
    status: Optional[ItemStatus] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    started_at: Optional[dt.date] = None
    finished_at: Optional[dt.date] = None
    notes_md: Optional[str] = Field(default=None, max_length=50_000)


class LearningItemResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    user_id: uuid.UUID
    kind: str
    title: str
    author: Optional[str] = None
    source_url: Optional[str] = None
    isbn: Optional[str] = None
    status: str
    rating: Optional[int] = None
    started_at: Optional[dt.date] = None
    finished_at: Optional[dt.date] = None
    notes_md: Optional[str] = None
    highlights_count: int = 0
    reading_progress: int = 0
    created_at: dt.datetime


class LearningItemListResponse(BaseModel):
    items: List[LearningItemResponse]


# ── Highlights ────────────────────────────────────────────────────────────

class HighlightCreate(BaseModel):
    item_id: uuid.UUID
    text: str = Field(min_length=1, max_length=2000)
    note: Optional[str] = Field(default=None, max_length=2000)
    page_number: Optional[int] = Field(default=None, ge=1)
    location: Optional[str] = Field(default=None, max_length=100)


class HighlightResponse(ORMModel):
    id: uuid.UUID
    item_id: uuid.UUID
    user_id: uuid.UUID
    text: str
    note: Optional[str] = None
    page_number: Optional[int] = None
    location: Optional[str] = None
    created_at: dt.datetime


class HighlightListResponse(BaseModel):
    highlights: List[HighlightResponse]


# ── Flashcards from highlights ────────────────────────────────────────────

class FlashcardsFromHighlightsRequest(BaseModel):
    item_id: uuid.UUID
    deck_name: str = Field(default="Generated", min_length=1, max_length=100)
    highlight_ids: Optional[List[uuid.UUID]] = Field(
        default=None, description="Only these highlights; all of the caller's when omitted"
    )


class SourceItem(BaseModel):
    id: uuid.UUID
    title: str
    author: Optional[str] = None


class FlashcardsFromHighlightsResponse(BaseModel):
    flashcards: List[FlashcardResponse]
    count: int
    source_item: SourceItem
