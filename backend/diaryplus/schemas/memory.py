"""
Memory, memory collection and time capsule schemas, plus the scheduler
delivery report.
"""

import datetime as dt
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from diaryplus.schemas.auth import normalize_email
from diaryplus.schemas.common import ORMModel, ProjectScopedRequest, TaggedModel


class MemoryCreate(ProjectScopedRequest, TaggedModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=10_000)
    memory_date: dt.date
    location_name: Optional[str] = Field(default=None, max_length=200)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    mood: Optional[int] = Field(default=None, ge=1, le=5)
    is_favorite: bool = False
    is_private: bool = True
    photo_count: int = Field(default=0, ge=0)


class MemoryUpdate(TaggedModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=10_000)
    memory_date: Optional[dt.date] = None
    location_name: Optional[str] = Field(default=None, max_length=200)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    mood: Optional[int] = Field(default=None, ge=1, le=5)
    is_favorite: Optional[bool] = None
    is_private: Optional[bool] = None
    photo_count: Optional[int] = Field(default=None, ge=0)


class MemoryResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    title: str
    description: Optional[str] = None
    memory_date: dt.date
    location_name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    mood: Optional[int] = None
    is_favorite: bool
    is_private: bool
    tags: List[str]
    photo_count: int
    created_at: dt.datetime


class MemoryListResponse(BaseModel):
    memories: List[MemoryResponse]


# ── Collections ───────────────────────────────────────────────────────────

class MemoryCollectionCreate(ProjectScopedRequest):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_public: bool = False


class MemoryCollectionResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: Optional[str] = None
    is_public: bool
    memory_count: int = 0
    created_at: dt.datetime


class MemoryCollectionListResponse(BaseModel):
    collections: List[MemoryCollectionResponse]


class CollectionMemoryAdd(BaseModel):
    memory_id: uuid.UUID


# ── Time capsules ─────────────────────────────────────────────────────────

class TimeCapsuleCreate(ProjectScopedRequest):
    title: str = Field(min_length=1, max_length=200)
    subject: Optional[str] = Field(default=None, max_length=200)
    content_md: str = Field(min_length=1, max_length=50_000)
    deliver_on: dt.date
    target_email: str = Field(max_length=255)

    @field_validator("target_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class TimeCapsuleResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    title: str
    subject: Optional[str] = None
    content_md: str
    deliver_on: dt.date
    target_email: str
    sent: bool
    sent_at: Optional[dt.datetime] = None
    created_at: dt.datetime


class TimeCapsuleListResponse(BaseModel):
    capsules: List[TimeCapsuleResponse]


class CapsuleDeliveryResult(BaseModel):
    capsule_id: uuid.UUID
    target_email: str
    title: str
    status: str


class CapsuleDeliveryReport(BaseModel):
    processed: int
    delivered: int
    results: List[CapsuleDeliveryResult]
