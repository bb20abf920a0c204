"""
Goal (OKR) schemas. KeyResultResponse.progress is derived:
min(100, current / target * 100 rounded half up), 0 when target is 0.
"""

import datetime as dt
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field

from diaryplus.rounding import round_half_up
from diaryplus.schemas.common import ORMModel, ProjectScopedRequest

GoalStatus = Literal["active", "completed", "archived"]


class KeyResultIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    target: float = Field(ge=0)
    unit: Optional[str] = Field(default=None, max_length=30)


class GoalCreate(ProjectScopedRequest):
    objective: str = Field(min_length=2, max_length=300)
    due_date: Optional[dt.date] = None
    key_results: List[KeyResultIn] = Field(default_factory=list, max_length=20)


class GoalUpdate(BaseModel):
    objective: Optional[str] = Field(default=None, min_length=2, max_length=300)
    due_date: Optional[dt.date] = None
    status: Optional[GoalStatus] = None


class KeyResultUpdate(BaseModel):
    current: float = Field(ge=0)


class KeyResultResponse(ORMModel):
    id: uuid.UUID
    goal_id: uuid.UUID
    name: str
    target: float
    current: float
    unit: Optional[str] = None

    @computed_field
    @property
    def progress(self) -> int:
        if not self.target:
            return 0
        return min(100, round_half_up(self.current / self.target * 100))


class GoalResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    user_id: uuid.UUID
    objective: str
    due_date: Optional[dt.date] = None
    status: str
    key_results: List[KeyResultResponse]
    created_at: dt.datetime


class GoalListResponse(BaseModel):
    goals: List[GoalResponse]
