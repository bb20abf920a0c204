"""
DiaryPlus Backend — Shared Route Dependencies
===============================================

What:  FastAPI dependencies reused across routers.

    get_current_user     Bearer header or auth cookie → User row (401 otherwise)
    require_project_id   `projectId` query parameter, 400 when missing
    feedback_rate_limit  per-IP limit for the public feedback form
    verify_cron_secret   `Authorization: Bearer <CRON_SECRET>` for scheduler calls
"""

import hmac
import logging
import uuid
from typing import Optional

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.config import settings
from diaryplus.database import get_db_session
from diaryplus.exceptions import AuthenticationError, RateLimitExceededError, ValidationError
from diaryplus.middleware.logging import client_ip_of
from diaryplus.middleware.rate_limit import SlidingWindowLimiter
from diaryplus.models.user import User
from diaryplus.services.auth_service import decode_access_token

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> User:
    token = _bearer_token(request) or request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise AuthenticationError()

    user_id = decode_access_token(token)
    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError(message="Account no longer exists")

    # Picked up by the access log
    request.state.user_id = user.id
    return user


async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    """Like get_current_user, but anonymous callers get None."""
    token = _bearer_token(request) or request.cookies.get(settings.auth_cookie_name)
    if not token:
        return None
    try:
        return await get_current_user(request, db)
    except AuthenticationError:
        return None


def require_project_id(
    project_id: Optional[uuid.UUID] = Query(default=None, alias="projectId"),
) -> uuid.UUID:
    if project_id is None:
        raise ValidationError(message="projectId is required", field="projectId")
    return project_id


feedback_limiter = SlidingWindowLimiter(
    limit=lambda: settings.feedback_rate_limit_requests,
    window=lambda: settings.feedback_rate_limit_window,
    name="feedback",
)


async def feedback_rate_limit(request: Request) -> None:
    retry_after = feedback_limiter.hit(client_ip_of(request))
    if retry_after:
        raise RateLimitExceededError(retry_after=retry_after)


async def verify_cron_secret(request: Request) -> None:
    token = _bearer_token(request)
    if not settings.cron_secret or not token:
        raise AuthenticationError(message="Unauthorized")
    if not hmac.compare_digest(token.encode(), settings.cron_secret.encode()):
        logger.warning("Rejected scheduler call with a wrong secret from %s", client_ip_of(request))
        raise AuthenticationError(message="Unauthorized")
