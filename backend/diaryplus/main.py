"""
DiaryPlus Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       `app = create_app()` is what uvicorn serves (diaryplus.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware Chain (outermost first):                 │
    │  RateLimit → RequestID → Logging → GZip → CORS       │
    │                                                      │
    │  Routers:                                            │
    │  auth · projects · life-areas · journal · logs       │
    │  habits · routines · goals · people · flashcards     │
    │  memories · feedback · investor-updates · decisions  │
    │  vault · yearbook · export · health                  │
    │                                                      │
    │  Exception Handlers:                                 │
    │  400 · 401 · 403 · 404 · 409 · 429 · 500 · 503       │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → configuration check → storage directory
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from diaryplus import __version__
from diaryplus.config import settings
from diaryplus.database import dispose_engine
from diaryplus.exceptions import (
    AuthenticationError,
    CircuitBreakerOpenError,
    ConflictError,
    DiaryPlusError,
    FileStorageError,
    LLMServiceError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitExceededError,
    ValidationError,
)
from diaryplus.middleware.logging import RequestLoggingMiddleware
from diaryplus.middleware.rate_limit import RateLimitMiddleware
from diaryplus.middleware.request_id import RequestIDMiddleware, request_id_var
from diaryplus.routes import (
    auth,
    decisions,
    export,
    feedback,
    flashcards,
    goals,
    habits,
    health,
    investor_updates,
    journal,
    learning,
    life_areas,
    logs,
    memories,
    people,
    projects,
    routines,
    vault,
    yearbook,
)
from diaryplus.services.file_service import file_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, writing to stdout.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Access lines come from the `diaryplus.access` logger
    (middleware/logging.py); everything else from module loggers.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("DiaryPlus Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: the server still answers health checks and most routes
        logger.error("Configuration error: %s", str(e))

    file_service.ensure_root()
    logger.info("Storage directory: %s", file_service.storage_root)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("DiaryPlus Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {"error": error, "message": message}
    if details:
        content["details"] = details
    content["request_id"] = _request_id(request)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the DiaryPlusError hierarchy to HTTP responses.

    Handler table:
        ValidationError         → 400 validation_error (details echoed)
        AuthenticationError     → 401 unauthorized
        PermissionDeniedError   → 403 forbidden
        NotFoundError           → 404 not_found
        ConflictError           → 409 conflict
        RateLimitExceededError  → 429 rate_limit_exceeded (+ Retry-After)
        FileStorageError        → 500 server_error
        IntegrityError          → 409 conflict (concurrent duplicate)
        SQLAlchemyError         → 500 server_error (generic message)
        LLMServiceError         → 503 llm_service_error
        CircuitBreakerOpenError → 503 service_unavailable
        DiaryPlusError (base)   → 500 server_error
        Exception (fallback)    → 500 internal_server_error

    Stack traces, SQL and file paths stay in the server log.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return _error_response(request, 400, "validation_error", exc.message, exc.context)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(request, 401, "unauthorized", exc.message)

    @app.exception_handler(PermissionDeniedError)
    async def handle_permission_denied(request: Request, exc: PermissionDeniedError):
        logger.info("[%s] Forbidden: %s", _request_id(request), exc.message)
        return _error_response(request, 403, "forbidden", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(request, 404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(request, 409, "conflict", exc.message)

    @app.exception_handler(RateLimitExceededError)
    async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
        return _error_response(
            request,
            429,
            "rate_limit_exceeded",
            exc.message,
            exc.context,
            headers={"Retry-After": str(exc.retry_after)},
        )

    @app.exception_handler(CircuitBreakerOpenError)
    async def handle_circuit_breaker(request: Request, exc: CircuitBreakerOpenError):
        logger.warning("[%s] Circuit breaker open: %s", _request_id(request), exc.message)
        return _error_response(
            request,
            503,
            "service_unavailable",
            exc.message,
            {"recovery_time": exc.recovery_time},
            headers={"Retry-After": str(exc.recovery_time)},
        )

    @app.exception_handler(LLMServiceError)
    async def handle_llm_error(request: Request, exc: LLMServiceError):
        logger.error("[%s] LLM service error: %s", _request_id(request), exc.message)
        headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after else None
        return _error_response(
            request, 503, "llm_service_error", exc.message, exc.context, headers=headers
        )

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        # Unique constraints back up the service-level duplicate checks
        logger.warning("[%s] Integrity error: %s", _request_id(request), exc.orig)
        return _error_response(request, 409, "conflict", "Resource already exists")

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        logger.error("[%s] Database error: %s", _request_id(request), str(exc), exc_info=True)
        return _error_response(
            request, 500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        logger.error(
            "[%s] File storage error: %s | Context: %s", _request_id(request), exc.message, exc.context
        )
        return _error_response(request, 500, "server_error", exc.message)

    @app.exception_handler(DiaryPlusError)
    async def handle_diaryplus_error(request: Request, exc: DiaryPlusError):
        logger.error("[%s] Unhandled application error: %s", _request_id(request), exc.message)
        return _error_response(request, 500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", _request_id(request), str(exc), exc_info=True)
        return _error_response(
            request,
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

ROUTERS = (
    auth,
    projects,
    life_areas,
    journal,
    logs,
    habits,
    routines,
    goals,
    people,
    flashcards,
    learning,
    memories,
    feedback,
    investor_updates,
    decisions,
    vault,
    yearbook,
    export,
    health,
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="DiaryPlus API",
        description=(
            "REST backend for a founder journal: projects, daily logs, weekly reviews, "
            "habits, routines, OKRs, people, a reading list with highlights, flashcards, "
            "memories and collections, feedback, investor updates, decision records, "
            "the Private Vault and yearbook exports."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,  # auth cookie
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Retry-After", "Content-Disposition"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    for module in ROUTERS:
        app.include_router(module.router)

    return app


app = create_app()
