"""
Feedback board schemas.

Submissions may come from anonymous visitors, so the project reference is
optional here unlike the other create bodies.
"""

import datetime as dt
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel

FeedbackType = Literal["suggestion", "bug", "feature_request", "improvement", "other"]
VoteType = Literal["up", "down"]
FeedbackSort = Literal["newest", "oldest", "most_voted", "status"]


class FeedbackCreate(BaseModel):
    feedback_type: FeedbackType
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=10, max_length=2000)
    category: Optional[str] = Field(default=None, max_length=50)
    project_id: Optional[uuid.UUID] = Field(default=None, alias="projectId")

    model_config = {"populate_by_name": True}


class FeedbackResponse(ORMModel):
    id: uuid.UUID
    feedback_type: str
    title: str
    description: str
    category: Optional[str] = None
    priority: str
    status: str
    tracking_id: str
    created_at: dt.datetime
    votes_count: int = 0
    user_vote: Optional[str] = None


class FeedbackListResponse(BaseModel):
    feedback: List[FeedbackResponse]


class VoteRequest(BaseModel):
    vote_type: VoteType


class VoteResponse(BaseModel):
    action: Literal["created", "updated", "removed"]
    votes_count: int
