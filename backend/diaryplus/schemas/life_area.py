"""Life area request/response schemas."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class LifeAreaCreate(ProjectScopedRequest):
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    color: str = Field(default="#6366F1", pattern=HEX_COLOR)
    icon: Optional[str] = Field(default=None, max_length=16)
    sort_order: int = Field(default=0, ge=0, le=1000)


class LifeAreaUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    icon: Optional[str] = Field(default=None, max_length=16)
    sort_order: Optional[int] = Field(default=None, ge=0, le=1000)
    is_active: Optional[bool] = None


class LifeAreaResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    name: str
    description: Optional[str] = None
    color: str
    icon: Optional[str] = None
    sort_order: int
    is_active: bool
    created_at: datetime


class LifeAreaListResponse(BaseModel):
    areas: List[LifeAreaResponse]
