"""
DiaryPlus Backend — Rate Limiting
===================================

What:  Per-IP sliding window rate limiting.
How:   `SlidingWindowLimiter` keeps a list of request timestamps per key.
       On each hit it drops timestamps older than the window and rejects when
       the remaining count reaches the limit.
Who:   - RateLimitMiddleware: global limit for every API request
       - Route dependencies (see dependencies.py): stricter per-endpoint
         limits, e.g. the public feedback form (5 per 15 minutes)

Algorithm: Sliding window counter
    The window always covers the last N seconds, so a client cannot burst
    2× the limit across a fixed-window boundary.

Scope:
    State lives in process memory, which is correct for a single uvicorn
    worker. Multi-worker deployments need a shared store (e.g. Redis).
"""

import logging
import time
from collections import defaultdict
from typing import Callable, Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from diaryplus.config import settings
from diaryplus.middleware.logging import client_ip_of

logger = logging.getLogger(__name__)


class SlidingWindowLimiter:
    """
    In-memory sliding window limiter keyed by an arbitrary string.

    `limit` and `window` are read through callables so tests and settings
    overrides take effect without rebuilding the limiter.
    """

    CLEANUP_EVERY = 1000

    def __init__(
        self,
        limit: Callable[[], int],
        window: Callable[[], int],
        name: str = "default",
    ):
        self._limit = limit
        self._window = window
        self.name = name
        self._hits: Dict[str, List[float]] = defaultdict(list)
        self._since_cleanup = 0

    def hit(self, key: str) -> int:
        """
        Record one request for `key`.

        Returns:
            0 when the request is allowed, otherwise the number of seconds
            until the oldest request leaves the window.
        """
        now = time.time()
        window = self._window()
        window_start = now - window

        timestamps = [ts for ts in self._hits[key] if ts > window_start]
        self._hits[key] = timestamps

        if len(timestamps) >= self._limit():
            retry_after = int(timestamps[0] + window - now) + 1
            logger.warning(
                "Rate limit '%s' exceeded for %s: %d requests in %ds window",
                self.name,
                key,
                len(timestamps),
                window,
            )
            return retry_after

        timestamps.append(now)

        self._since_cleanup += 1
        if self._since_cleanup >= self.CLEANUP_EVERY:
            self._since_cleanup = 0
            self._cleanup(window_start)
        return 0

    def reset(self) -> None:
        self._hits.clear()
        self._since_cleanup = 0

    def _cleanup(self, window_start: float) -> None:
        """Drop keys with no requests inside the current window."""
        inactive = [
            key for key, timestamps in self._hits.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for key in inactive:
            del self._hits[key]
        if inactive:
            logger.debug("Rate limiter '%s' dropped %d idle keys", self.name, len(inactive))


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Global per-IP limiter (settings.rate_limit_requests per
    settings.rate_limit_window seconds).

    Health checks, docs and the scheduler endpoints are never limited.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}
    EXCLUDED_PREFIXES = ("/api/cron/",)

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self.limiter = SlidingWindowLimiter(
            limit=lambda: settings.rate_limit_requests,
            window=lambda: settings.rate_limit_window,
            name="global",
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.EXCLUDED_PATHS or path.startswith(self.EXCLUDED_PREFIXES):
            return await call_next(request)

        retry_after = self.limiter.hit(client_ip_of(request))
        if retry_after:
            # Middleware runs outside the exception handlers, so the 429 body
            # is built here in the same shape the handlers use.
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": f"Too many requests. Please wait {retry_after} seconds before retrying.",
                    "details": {"retry_after": retry_after},
                },
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
