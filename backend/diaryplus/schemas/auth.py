"""
DiaryPlus Backend — Auth Schemas
==================================

Signup/signin bodies and the user/session payloads returned to the client.
Emails are validated loosely (shape only) and lower-cased; the password is
never echoed back in any response model.
"""

import re
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from diaryplus.schemas.common import ORMModel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(value: str) -> str:
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email address")
    return email


class SignupRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(min_length=6, max_length=128)
    name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class SigninRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(ORMModel):
    id: uuid.UUID
    email: str
    name: Optional[str] = None
    onboarding_completed: bool
    default_project_id: Optional[uuid.UUID] = None
    created_at: datetime


class AuthResponse(BaseModel):
    """Returned by signup/signin. The same token is also set as a cookie."""

    user: UserResponse
    token: str
    token_type: str = "bearer"
