"""
DiaryPlus Backend — Access Log Middleware
===========================================

What:  One access-log line per request on the `diaryplus.access` logger.
How:   Builds a record dict (also passed as `extra` for structured handlers),
       picks the level from the status class and renders a short text line:

           GET /api/logs 200 12.4ms [a1b2c3d4] from 10.0.0.7 user=9f0c...

Runs inside RequestIDMiddleware so the ID is already set.

Never logged: request or response bodies (journal content, passwords),
Authorization headers, cookies.
"""

import logging
import time
from typing import Any, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from diaryplus.middleware.request_id import request_id_var

logger = logging.getLogger("diaryplus.access")

# Load balancer probes
QUIET_PATHS = frozenset({"/health"})


def client_ip_of(request: Request) -> str:
    """First X-Forwarded-For hop when proxied, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            # Also runs when the app raised past the exception handlers
            self._emit(request, status, (time.perf_counter() - started) * 1000)

    @staticmethod
    def _emit(request: Request, status: int, duration_ms: float) -> None:
        # request.state.user_id is set by the auth dependency
        user_id = getattr(request.state, "user_id", None)
        record: Dict[str, Any] = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            "client_ip": client_ip_of(request),
            "user_id": str(user_id) if user_id else None,
        }
        logger.log(
            level_for_status(status),
            "%(method)s %(path)s %(status)d %(duration_ms).1fms [%(request_id)s] from %(client_ip)s user=%(user)s",
            {**record, "user": record["user_id"] or "-"},
            extra=record,
        )
