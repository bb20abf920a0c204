"""
DiaryPlus Backend — Shared Pydantic Schemas
=============================================

What:  Base classes and envelopes reused by every domain schema module.

Conventions:
    - Request bodies accept `projectId` (what the pages send) or `project_id`.
    - Response models read straight from ORM objects (`from_attributes`).
    - Error bodies always look like ErrorResponse; the global exception
      handlers in main.py build them.
"""

import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

MAX_TAGS = 20


class ORMModel(BaseModel):
    """Response base: builds from SQLAlchemy objects."""

    model_config = {"from_attributes": True}


class ProjectScopedRequest(BaseModel):
    """Request body addressed to one project."""

    project_id: uuid.UUID = Field(alias="projectId", description="Owning project")

    model_config = {"populate_by_name": True}


def clean_tags(tags: Optional[List[str]]) -> List[str]:
    """
    Normalize a tag list: trim whitespace, drop empties and duplicates while
    keeping first-seen order.
    """
    if not tags:
        return []
    seen: List[str] = []
    for tag in tags:
        value = tag.strip()
        if value and value not in seen:
            seen.append(value)
    if len(seen) > MAX_TAGS:
        raise ValueError(f"At most {MAX_TAGS} tags are allowed")
    return seen


class TaggedModel(BaseModel):
    """Mixin-style base for bodies carrying a `tags` list."""

    tags: Optional[List[str]] = Field(default=None, description="Free-form labels")

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return None if v is None else clean_tags(v)


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Shape of every error body produced by the global handlers."""

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable explanation")
    details: Optional[Dict[str, Any]] = Field(default=None)
    request_id: Optional[str] = Field(default=None, description="Correlation ID for support")


class HealthResponse(BaseModel):
    """
    Returned by GET /health.

    status: healthy | degraded (AI unavailable) | unhealthy (database down)
    """

    status: str
    version: str
    database: str
    ai: str
    uptime_seconds: float
