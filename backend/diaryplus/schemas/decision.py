"""
Architectural Decision Record schemas.
"""

import datetime as dt
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest

DecisionStatus = Literal["proposed", "accepted", "superseded"]


class DecisionCreate(ProjectScopedRequest):
    title: str = Field(min_length=1, max_length=200)
    context_md: str = Field(default="", max_length=50_000)
    options_md: str = Field(default="", max_length=50_000)
    decision_md: str = Field(default="", max_length=50_000)
    consequences_md: str = Field(default="", max_length=50_000)
    relates_to: List[uuid.UUID] = Field(default_factory=list, max_length=50)
    status: DecisionStatus = "proposed"


class DecisionUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    context_md: Optional[str] = Field(default=None, max_length=50_000)
    options_md: Optional[str] = Field(default=None, max_length=50_000)
    decision_md: Optional[str] = Field(default=None, max_length=50_000)
    consequences_md: Optional[str] = Field(default=None, max_length=50_000)
    relates_to: Optional[List[uuid.UUID]] = Field(default=None, max_length=50)
    status: Optional[DecisionStatus] = None


class DecisionResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    user_id: uuid.UUID
    title: str
    context_md: str
    options_md: str
    decision_md: str
    consequences_md: str
    relates_to: List[str]
    status: str
    created_at: dt.datetime
    updated_at: dt.datetime


class DecisionListResponse(BaseModel):
    decisions: List[DecisionResponse]
