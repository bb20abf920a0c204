"""
Routine schemas (morning/evening routines, their steps and daily logs).
"""

import datetime as dt
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest

RoutineType = Literal["morning", "evening"]


class RoutineStepIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    duration_minutes: int = Field(default=5, ge=1, le=60)
    is_required: bool = True


class RoutineCreate(ProjectScopedRequest):
    name: str = Field(min_length=1, max_length=100)
    type: RoutineType
    description: Optional[str] = Field(default=None, max_length=1000)
    target_duration_minutes: int = Field(default=30, ge=5, le=120)
    steps: List[RoutineStepIn] = Field(min_length=1, max_length=50)


class RoutineUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    target_duration_minutes: Optional[int] = Field(default=None, ge=5, le=120)
    is_active: Optional[bool] = None
    steps: Optional[List[RoutineStepIn]] = Field(default=None, min_length=1, max_length=50)


class RoutineStepResponse(ORMModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    duration_minutes: int
    is_required: bool
    order_index: int


class RoutineLogResponse(ORMModel):
    id: uuid.UUID
    routine_id: uuid.UUID
    date: dt.date
    status: str
    started_at: Optional[dt.datetime] = None
    completed_at: Optional[dt.datetime] = None
    completed_steps: List[str]
    completion_rate: int
    duration_minutes: Optional[int] = None
    notes: Optional[str] = None


class RoutineResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    name: str
    type: str
    description: Optional[str] = None
    target_duration_minutes: int
    is_active: bool
    steps: List[RoutineStepResponse]
    created_at: dt.datetime
    today_log: Optional[RoutineLogResponse] = None


class RoutineListResponse(BaseModel):
    routines: List[RoutineResponse]


class RoutineStartRequest(BaseModel):
    date: Optional[dt.date] = Field(default=None, description="Defaults to today (UTC)")


class RoutineCompleteRequest(BaseModel):
    date: Optional[dt.date] = None
    notes: Optional[str] = Field(default=None, max_length=2000)
    duration_minutes: Optional[int] = Field(default=None, ge=0, le=600)


class RoutineLogListResponse(BaseModel):
    logs: List[RoutineLogResponse]
