"""
People (personal CRM) schemas.
"""

import datetime as dt
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest, TaggedModel

InteractionType = Literal["call", "text", "email", "meet", "gift", "other"]


class PersonCreate(ProjectScopedRequest, TaggedModel):
    name: str = Field(min_length=1, max_length=100)
    aka: Optional[str] = Field(default=None, max_length=100)
    birthday: Optional[dt.date] = None
    timezone: str = Field(default="UTC", max_length=64)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    notes_md: Optional[str] = Field(default=None, max_length=20_000)
    relationship_type: Optional[str] = Field(default=None, max_length=50)
    importance: int = Field(default=3, ge=1, le=5)


class PersonUpdate(TaggedModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    aka: Optional[str] = Field(default=None, max_length=100)
    birthday: Optional[dt.date] = None
    timezone: Optional[str] = Field(default=None, max_length=64)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    notes_md: Optional[str] = Field(default=None, max_length=20_000)
    relationship_type: Optional[str] = Field(default=None, max_length=50)
    importance: Optional[int] = Field(default=None, ge=1, le=5)


class PersonResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    name: str
    aka: Optional[str] = None
    tags: List[str]
    birthday: Optional[dt.date] = None
    timezone: str
    email: Optional[str] = None
    phone: Optional[str] = None
    notes_md: Optional[str] = None
    relationship_type: Optional[str] = None
    importance: int
    created_at: dt.datetime
    last_contact: Optional[dt.date] = None
    days_since_last_contact: Optional[int] = None
    days_until_birthday: Optional[int] = None


class PersonListResponse(BaseModel):
    people: List[PersonResponse]


class InteractionCreate(BaseModel):
    date: dt.date
    type: InteractionType
    notes_md: Optional[str] = Field(default=None, max_length=20_000)
    sentiment: Optional[int] = Field(default=None, ge=1, le=5)
    duration_minutes: Optional[int] = Field(default=None, ge=0, le=1440)


class InteractionResponse(ORMModel):
    id: uuid.UUID
    person_id: uuid.UUID
    date: dt.date
    type: str
    notes_md: Optional[str] = None
    sentiment: Optional[int] = None
    duration_minutes: Optional[int] = None
    created_at: dt.datetime


class InteractionListResponse(BaseModel):
    interactions: List[InteractionResponse]


class BirthdayResponse(BaseModel):
    id: uuid.UUID
    name: str
    birthday: dt.date
    upcoming_birthday: dt.date
    days_until_birthday: int
    turning_age: int


class BirthdayListResponse(BaseModel):
    birthdays: List[BirthdayResponse]
