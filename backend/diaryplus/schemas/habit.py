"""
Habit schemas.

HabitResponse carries the derived stats (current_streak, this_week_count,
completion_rate) computed in services/habit_service.py.
"""

import datetime as dt
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class HabitCreate(ProjectScopedRequest):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    schedule: str = Field(default="daily", max_length=50)
    target_per_week: int = Field(default=7, ge=1, le=7)
    area_id: Optional[uuid.UUID] = None
    color: str = Field(default="#10B981", pattern=HEX_COLOR)
    icon: str = Field(default="✅", max_length=16)


class HabitUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    schedule: Optional[str] = Field(default=None, max_length=50)
    target_per_week: Optional[int] = Field(default=None, ge=1, le=7)
    area_id: Optional[uuid.UUID] = None
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    icon: Optional[str] = Field(default=None, max_length=16)
    archived: Optional[bool] = None


class HabitResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    title: str
    description: Optional[str] = None
    schedule: str
    target_per_week: int
    area_id: Optional[uuid.UUID] = None
    color: str
    icon: str
    archived: bool
    created_at: dt.datetime
    current_streak: int = 0
    this_week_count: int = 0
    completion_rate: int = 0


class HabitListResponse(BaseModel):
    habits: List[HabitResponse]


class HabitLogRequest(BaseModel):
    date: dt.date
    done: bool = True
    note: Optional[str] = Field(default=None, max_length=1000)


class HabitLogResponse(ORMModel):
    id: uuid.UUID
    habit_id: uuid.UUID
    date: dt.date
    done: bool
    note: Optional[str] = None


class HabitLogListResponse(BaseModel):
    logs: List[HabitLogResponse]
