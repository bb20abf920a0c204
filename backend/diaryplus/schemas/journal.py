"""
Journal (personal entry) schemas.

Entries default to private and to today's date; `is_encrypted` is read-only
and only changes through the vault seal/unseal endpoints.
"""

import datetime as dt
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest, TaggedModel

EntryType = Literal["daily", "weekly", "monthly", "reflection"]


class JournalEntryCreate(ProjectScopedRequest, TaggedModel):
    life_area_id: Optional[uuid.UUID] = None
    entry_date: Optional[dt.date] = Field(default=None, description="Defaults to today (UTC)")
    title: Optional[str] = Field(default=None, max_length=200)
    content: str = Field(min_length=1, max_length=50_000)
    mood: Optional[int] = Field(default=None, ge=1, le=5)
    energy_level: Optional[int] = Field(default=None, ge=1, le=5)
    gratitude_notes: Optional[str] = Field(default=None, max_length=5000)
    goals_progress: Optional[str] = Field(default=None, max_length=5000)
    is_private: bool = True
    entry_type: EntryType = "daily"
    location_name: Optional[str] = Field(default=None, max_length=200)


class JournalEntryUpdate(TaggedModel):
    life_area_id: Optional[uuid.UUID] = None
    entry_date: Optional[dt.date] = None
    title: Optional[str] = Field(default=None, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1, max_length=50_000)
    mood: Optional[int] = Field(default=None, ge=1, le=5)
    energy_level: Optional[int] = Field(default=None, ge=1, le=5)
    gratitude_notes: Optional[str] = Field(default=None, max_length=5000)
    goals_progress: Optional[str] = Field(default=None, max_length=5000)
    is_private: Optional[bool] = None
    entry_type: Optional[EntryType] = None
    location_name: Optional[str] = Field(default=None, max_length=200)


class JournalEntryResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    life_area_id: Optional[uuid.UUID] = None
    entry_date: dt.date
    title: Optional[str] = None
    content: str
    mood: Optional[int] = None
    energy_level: Optional[int] = None
    gratitude_notes: Optional[str] = None
    goals_progress: Optional[str] = None
    tags: List[str]
    is_private: bool
    entry_type: str
    location_name: Optional[str] = None
    is_encrypted: bool
    created_at: dt.datetime
    updated_at: dt.datetime


class JournalEntryListResponse(BaseModel):
    entries: List[JournalEntryResponse]
    total_count: int
