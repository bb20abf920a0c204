"""
Daily log and weekly review schemas.
"""

import datetime as dt
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest, TaggedModel


class DailyLogCreate(ProjectScopedRequest, TaggedModel):
    date: dt.date
    title: str = Field(min_length=1, max_length=200)
    content_md: str = Field(default="", max_length=50_000)
    mood: Optional[int] = Field(default=None, ge=1, le=5)
    time_spent_minutes: int = Field(default=0, ge=0, le=1440)


class DailyLogUpdate(TaggedModel):
    date: Optional[dt.date] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content_md: Optional[str] = Field(default=None, max_length=50_000)
    mood: Optional[int] = Field(default=None, ge=1, le=5)
    time_spent_minutes: Optional[int] = Field(default=None, ge=0, le=1440)


class DailyLogResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    user_id: uuid.UUID
    date: dt.date
    title: str
    content_md: str
    tags: List[str]
    mood: Optional[int] = None
    time_spent_minutes: int
    created_at: dt.datetime


class DailyLogListResponse(BaseModel):
    logs: List[DailyLogResponse]


class WeeklyReviewRequest(ProjectScopedRequest):
    from_date: dt.date = Field(alias="from")
    to_date: dt.date = Field(alias="to")

    @model_validator(mode="after")
    def check_range(self) -> "WeeklyReviewRequest":
        if self.from_date > self.to_date:
            raise ValueError("'from' must be on or before 'to'")
        return self


class WeeklyReviewResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    week_start: dt.date
    week_end: dt.date
    content_md: str
    ai_summary: Optional[str] = None
    created_at: dt.datetime


class WeeklyReviewListResponse(BaseModel):
    reviews: List[WeeklyReviewResponse]
