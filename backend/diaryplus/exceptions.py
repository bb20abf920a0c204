"""
DiaryPlus Backend — Exception Hierarchy
=========================================

Services raise these; the handlers registered in main.py turn them into
{"error", "message", "details", "request_id"} bodies.

    DiaryPlusError
    ├── ValidationError          400  business rule violated
    ├── AuthenticationError      401  no session, bad token, wrong password
    ├── PermissionDeniedError    403  not a member, or role too low
    ├── NotFoundError            404  missing, or not visible to the caller
    ├── ConflictError            409  duplicate (e.g. email already registered)
    ├── RateLimitExceededError   429  sliding window exhausted
    ├── FileStorageError         500  export file could not be written/read
    ├── LLMServiceError          503  Gemini failed after retries
    └── CircuitBreakerOpenError  503  Gemini short-circuited

`context` goes to the server log. Only 400, 429 and the 503s echo it back
as `details`. SQLAlchemy errors are not wrapped; main.py maps them directly.
"""

from typing import Any, Dict, Optional


class DiaryPlusError(Exception):
    """
    Root of the hierarchy.

    Subclasses that only need a different default text override
    `default_message`.
    """

    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DiaryPlusError):
    """
    A rule Pydantic cannot express: "an update already exists for this
    month", "password too weak". Schema errors stay FastAPI's 422.
    """

    default_message = "Validation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message, ctx)
        self.field = field


class AuthenticationError(DiaryPlusError):
    default_message = "Authentication required"


class PermissionDeniedError(DiaryPlusError):
    default_message = "Access denied"


class NotFoundError(DiaryPlusError):
    """Built from the resource name so messages stay uniform across services."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = (
                f"{resource} with ID '{resource_id}' was not found"
                if resource_id
                else f"The requested {resource} was not found"
            )
        ctx: Dict[str, Any] = {"resource": resource}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message, ctx)


class ConflictError(DiaryPlusError):
    default_message = "Resource already exists"


class FileStorageError(DiaryPlusError):
    default_message = "File storage operation failed"


class LLMServiceError(DiaryPlusError):
    """
    Raised by GeminiService once tenacity gives up. SummaryService catches it
    and falls back to built-in markdown.
    """

    default_message = "AI summary service is temporarily unavailable"

    def __init__(
        self,
        message: Optional[str] = None,
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message, ctx)
        self.retry_after = retry_after


class CircuitBreakerOpenError(DiaryPlusError):
    """The breaker is OPEN; no call was made."""

    def __init__(self, recovery_time: int = 60):
        super().__init__(
            "AI service is temporarily unavailable due to repeated failures. "
            f"Retrying automatically in about {recovery_time} seconds.",
            {"recovery_time": recovery_time},
        )
        self.recovery_time = recovery_time


class RateLimitExceededError(DiaryPlusError):
    def __init__(self, retry_after: int = 60):
        super().__init__(
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests.",
            {"retry_after": retry_after},
        )
        self.retry_after = retry_after
