"""
DiaryPlus Backend — Auth and User Routes
==========================================

What:  Signup, signin, signout and the current-user endpoints, plus the two
       onboarding calls made by the setup wizard.

Session transport:
    Signup and signin return the JWT in the body and also set it as an
    HttpOnly cookie (settings.auth_cookie_name) so the pages can rely on
    either. Signout only clears the cookie; tokens are stateless.
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.config import settings
from diaryplus.database import get_db_session
from diaryplus.dependencies import get_current_user
from diaryplus.models.user import User
from diaryplus.schemas.auth import AuthResponse, SigninRequest, SignupRequest, UserResponse
from diaryplus.schemas.common import ErrorResponse, MessageResponse
from diaryplus.schemas.project import OnboardingCompleteRequest, ProjectResponse
from diaryplus.services.auth_service import auth_service
from diaryplus.services.project_service import project_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.jwt_expire_days * 24 * 3600,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post(
    "/auth/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Create an account",
)
async def signup(
    body: SignupRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    result = await auth_service.signup(db, body)
    _set_auth_cookie(response, result.token)
    return result


@router.post(
    "/auth/signin",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Sign in with email and password",
)
async def signin(
    body: SigninRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    result = await auth_service.signin(db, body)
    _set_auth_cookie(response, result.token)
    return result


@router.post("/auth/signout", response_model=MessageResponse, summary="Clear the session cookie")
async def signout(response: Response) -> MessageResponse:
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return MessageResponse(message="Signed out")


@router.get(
    "/auth/me",
    response_model=UserResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="Current user",
)
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user)


# ── Onboarding ────────────────────────────────────────────────────────────

@router.post(
    "/user/ensure-personal",
    response_model=ProjectResponse,
    summary="Return the caller's Personal project, creating it when missing",
)
async def ensure_personal(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    return await project_service.ensure_personal(db, user)


@router.post(
    "/user/onboarding-complete",
    response_model=UserResponse,
    responses={403: {"description": "Not a member of the given project", "model": ErrorResponse}},
    summary="Mark onboarding as finished",
)
async def onboarding_complete(
    body: OnboardingCompleteRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    """
    Final step of the onboarding wizard. The earlier steps (profile, first
    project, life areas) use their own endpoints; this one only records
    completion and, when given, the default project.
    """
    return await project_service.complete_onboarding(db, user, body.project_id)
