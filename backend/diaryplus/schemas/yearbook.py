"""
Yearbook export schemas.
"""

import datetime as dt
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest

YearbookFormat = Literal["pdf", "epub"]
CoverStyle = Literal["minimal", "elegant", "modern"]


class YearbookRequest(ProjectScopedRequest):
    format: YearbookFormat = "pdf"
    start_date: dt.date = Field(alias="startDate")
    end_date: dt.date = Field(alias="endDate")
    title: Optional[str] = Field(default=None, max_length=200)
    include_photos: bool = Field(default=False, alias="includePhotos")
    include_location: bool = Field(default=True, alias="includeLocation")
    include_mood: bool = Field(default=True, alias="includeMood")
    redact_sensitive: bool = Field(default=False, alias="redactSensitive")
    cover_style: CoverStyle = Field(default="minimal", alias="coverStyle")

    @model_validator(mode="after")
    def check_range(self) -> "YearbookRequest":
        if self.start_date > self.end_date:
            raise ValueError("startDate must be on or before endDate")
        return self


class YearbookResult(BaseModel):
    id: uuid.UUID
    title: str
    format: str
    entry_count: int
    file_size: int
    download_url: str


class YearbookGenerationResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    format: str
    start_date: dt.date
    end_date: dt.date
    title: str
    entry_count: int
    file_size: int
    filename: str
    status: str
    download_count: int
    last_downloaded_at: Optional[dt.datetime] = None
    created_at: dt.datetime


class YearbookListResponse(BaseModel):
    generations: List[YearbookGenerationResponse]
