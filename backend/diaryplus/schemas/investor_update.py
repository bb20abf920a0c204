"""
Investor update schemas.

PublicInvestorUpdateResponse is what GET /api/public/updates/{slug} returns
to unauthenticated readers, so it deliberately omits ids of users and the
public/private flag.
"""

import datetime as dt
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ORMModel, ProjectScopedRequest


class InvestorUpdateCreate(ProjectScopedRequest):
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)
    content_md: Optional[str] = Field(
        default=None,
        max_length=100_000,
        description="Leave empty to generate from the month's logs and goals",
    )


class InvestorUpdateUpdate(BaseModel):
    content_md: Optional[str] = Field(default=None, min_length=1, max_length=100_000)
    is_public: Optional[bool] = None


class InvestorUpdateResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    month: int
    year: int
    content_md: str
    ai_summary: Optional[str] = None
    public_slug: str
    is_public: bool
    created_at: dt.datetime
    updated_at: dt.datetime


class InvestorUpdateListResponse(BaseModel):
    updates: List[InvestorUpdateResponse]


class PublicProject(BaseModel):
    name: str
    slug: str


class PublicInvestorUpdateResponse(BaseModel):
    id: uuid.UUID
    month: int
    year: int
    content_md: str
    ai_summary: Optional[str] = None
    created_at: dt.datetime
    project: PublicProject
