"""
Private Vault schemas: setup, seal/unseal and retention policy.
"""

import datetime as dt
import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from diaryplus.schemas.common import ProjectScopedRequest


class VaultSetupRequest(ProjectScopedRequest):
    password: str = Field(min_length=8, max_length=256)
    confirm_password: str = Field(alias="confirmPassword", max_length=256)


class VaultSetupResponse(BaseModel):
    success: bool = True
    message: str
    password_strength_score: int


class VaultStatusResponse(BaseModel):
    is_enabled: bool
    setup_at: Optional[dt.datetime] = None
    password_strength_score: Optional[int] = None


class KeyStrength(BaseModel):
    is_valid: bool
    score: int
    feedback: List[str]


class VaultPasswordRequest(BaseModel):
    password: str = Field(min_length=1, max_length=256)


class VaultUnsealRequest(VaultPasswordRequest):
    persist: bool = Field(default=False, description="Store the plaintext back and clear the sealed flag")


class SealResponse(BaseModel):
    entry_id: uuid.UUID
    is_encrypted: bool


class UnsealResponse(BaseModel):
    entry_id: uuid.UUID
    content: str
    is_encrypted: bool


class RetentionPolicyRequest(ProjectScopedRequest):
    enabled: bool
    delete_after_months: int = Field(ge=1, le=120)
    archive_after_months: int = Field(ge=1, le=120)
    notify_before_days: int = Field(ge=1, le=90)


class RetentionPolicyResponse(BaseModel):
    enabled: bool = False
    delete_after_months: int = 18
    archive_after_months: int = 12
    notify_before_days: int = 30
    updated_at: Optional[dt.datetime] = None
