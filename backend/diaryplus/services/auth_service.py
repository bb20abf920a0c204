"""
DiaryPlus Backend — Authentication Service
============================================

What:  Email/password accounts with bcrypt hashes and HS256 JWTs.
Who:   routes/auth.py for signup/signin; dependencies.get_current_user for
       every authenticated request.

Token claims:
    sub    user id (UUID string)
    email  login email at issue time
    iat    issued-at
    exp    issued-at + jwt_expire_days

Timing:
    Sign-in runs a bcrypt comparison even for unknown emails, so response
    time does not reveal whether an account exists.
"""

import logging
import uuid
from datetime import timedelta
from typing import Optional

import bcrypt
import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.config import settings
from diaryplus.database import utcnow
from diaryplus.exceptions import AuthenticationError, ConflictError, NotFoundError
from diaryplus.models.user import User
from diaryplus.schemas.auth import AuthResponse, SigninRequest, SignupRequest, UserResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        # Burn the same bcrypt cost for unknown accounts
        dummy = bcrypt.hashpw(b"dummy", bcrypt.gensalt(rounds=settings.bcrypt_rounds))
        bcrypt.checkpw(password.encode("utf-8"), dummy)
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_access_token(user_id: uuid.UUID, email: str) -> str:
    now = utcnow()
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> uuid.UUID:
    """
    Validate a token and return the user id it names.

    Raises:
        AuthenticationError: Expired, tampered or malformed token.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return uuid.UUID(payload["sub"])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(message="Session expired, please sign in again")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise AuthenticationError(message="Invalid authentication token")


class AuthService:
    """Account creation, sign-in and current-user lookup."""

    async def signup(self, db: AsyncSession, body: SignupRequest) -> AuthResponse:
        existing = await db.execute(select(User.id).where(User.email == body.email))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(message="User already exists with this email")

        user = User(
            email=body.email,
            password_hash=hash_password(body.password),
            name=body.name,
            onboarding_completed=False,
        )
        db.add(user)
        await db.flush()
        logger.info("User %s signed up", user.id)

        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=create_access_token(user.id, user.email),
        )

    async def signin(self, db: AsyncSession, body: SigninRequest) -> AuthResponse:
        result = await db.execute(select(User).where(User.email == body.email))
        user = result.scalar_one_or_none()

        if not verify_password(body.password, user.password_hash if user else None):
            logger.info("Failed sign-in attempt")
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        logger.info("User %s signed in", user.id)
        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=create_access_token(user.id, user.email),
        )

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user


auth_service = AuthService()
