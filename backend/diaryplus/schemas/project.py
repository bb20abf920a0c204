"""
DiaryPlus Backend — Project Schemas
=====================================

Projects, invitations and the onboarding endpoints that create or select a
project.
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from diaryplus.schemas.auth import normalize_email
from diaryplus.schemas.common import ORMModel

Role = Literal["owner", "admin", "member", "viewer"]


class ProjectCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)


class ProjectResponse(ORMModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    is_personal: bool
    private_vault: bool
    created_at: datetime
    role: Optional[str] = Field(default=None, description="Caller's role in the project")


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]


class InvitationCreate(BaseModel):
    email: str = Field(max_length=255)
    role: Role = "member"

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class InvitationResponse(ORMModel):
    id: uuid.UUID
    project_id: uuid.UUID
    email: str
    role: str
    status: str
    token: str
    expires_at: datetime
    created_at: datetime


class InvitationListResponse(BaseModel):
    invitations: List[InvitationResponse]


class OnboardingCompleteRequest(BaseModel):
    project_id: Optional[uuid.UUID] = Field(default=None, alias="projectId")

    model_config = {"populate_by_name": True}
