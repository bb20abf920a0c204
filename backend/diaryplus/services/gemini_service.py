"""
DiaryPlus Backend — Google Gemini Summary Provider
====================================================

What:  LLMService on google-generativeai. Turns a week of daily logs (or a
       month of logs and goals) into markdown.
Who:   Only SummaryService calls it, and it falls back to a built-in summary
       whenever this provider raises.

Call path:

    summarize()
      ├─ not configured          → LLMServiceError (no network)
      ├─ breaker OPEN            → CircuitBreakerOpenError (no network)
      └─ tenacity AsyncRetrying  → generate_content_async(timeout)
            ├─ text              → breaker success, return
            └─ attempts used up  → breaker failure, LLMServiceError

The retry policy is built per call from settings, so RETRY_* overrides apply
without re-importing the module.
"""

import logging
import time
import uuid
from typing import Callable, Optional

import google.generativeai as genai
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    stop_after_attempt,
    wait_exponential_jitter,
)

from diaryplus.config import settings
from diaryplus.exceptions import CircuitBreakerOpenError, LLMServiceError
from diaryplus.services.llm_base import LLMService

logger = logging.getLogger(__name__)

# Values shipped in .env.example that mean "no key"
PLACEHOLDER_KEYS = frozenset({"", "your_gemini_api_key_here"})


class EmptyCompletionError(Exception):
    """Gemini answered without any text; retried like any other failure."""


# ── Circuit Breaker ───────────────────────────────────────────────────────

class CircuitBreaker:
    """
    Three-state breaker in front of the Gemini API.

        closed ──(failure_threshold failures)──▶ open
        open ──(recovery_timeout elapsed)──▶ half_open
        half_open ──success──▶ closed
        half_open ──failure──▶ open

    State is per process.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self.state = self.CLOSED
        self.failure_count = 0
        self.opened_at: Optional[float] = None

    def _remaining(self) -> float:
        if self.opened_at is None:
            return 0.0
        return max(0.0, self.recovery_timeout - (self._clock() - self.opened_at))

    @property
    def is_open(self) -> bool:
        """OPEN and still cooling down (reported by /health)."""
        return self.state == self.OPEN and self._remaining() > 0

    def can_execute(self) -> bool:
        """
        Gate a call. Moves OPEN to HALF_OPEN once the cool-down is over.

        Raises:
            CircuitBreakerOpenError: still cooling down.
        """
        if self.state != self.OPEN:
            return True
        remaining = self._remaining()
        if remaining > 0:
            raise CircuitBreakerOpenError(recovery_time=int(remaining))
        logger.info("Circuit breaker half-open, letting one trial call through")
        self.state = self.HALF_OPEN
        return True

    def record_success(self) -> None:
        if self.state != self.CLOSED:
            logger.info("Circuit breaker closed, Gemini recovered")
        self.state = self.CLOSED
        self.failure_count = 0
        self.opened_at = None

    def record_failure(self) -> None:
        self.failure_count += 1
        if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
            if self.state != self.OPEN:
                logger.warning(
                    "Circuit breaker opened (%d consecutive failures, cooling down %ds)",
                    self.failure_count,
                    self.recovery_timeout,
                )
            self.state = self.OPEN
            self.opened_at = self._clock()


# ── Gemini Service ────────────────────────────────────────────────────────

class GeminiService(LLMService):

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = settings.gemini_api_key if api_key is None else api_key
        self.model_name = model_name or settings.gemini_model

        # The SDK keeps credentials in module state
        if self.is_configured:
            genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(self.model_name)
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )
        logger.info(
            "Gemini provider ready: model=%s configured=%s",
            self.model_name,
            self.is_configured,
        )

    @property
    def is_configured(self) -> bool:
        return self.api_key not in PLACEHOLDER_KEYS

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(settings.retry_max_attempts),
            wait=wait_exponential_jitter(
                initial=settings.retry_min_wait,
                max=settings.retry_max_wait,
                jitter=1,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )

    async def summarize(self, system_prompt: str, user_prompt: str) -> str:
        if not self.is_configured:
            raise LLMServiceError(message="GEMINI_API_KEY is not configured")

        self.circuit_breaker.can_execute()
        call_id = uuid.uuid4().hex[:8]
        logger.info("[%s] Gemini summary requested (%d chars of input)", call_id, len(user_prompt))

        try:
            async for attempt in self._retrying():
                with attempt:
                    text = await self._generate(system_prompt, user_prompt, call_id)
        except RetryError as e:
            self.circuit_breaker.record_failure()
            cause = e.last_attempt.exception()
            logger.error("[%s] Gemini gave up after %d attempt(s): %s",
                         call_id, e.last_attempt.attempt_number, cause)
            raise LLMServiceError(
                message="AI summary failed after multiple attempts.",
                retry_after=self.circuit_breaker.recovery_timeout,
                context={
                    "request_id": call_id,
                    "attempts": e.last_attempt.attempt_number,
                    "error_type": type(cause).__name__,
                },
            ) from cause

        self.circuit_breaker.record_success()
        return text

    async def _generate(self, system_prompt: str, user_prompt: str, call_id: str) -> str:
        started = time.perf_counter()
        try:
            response = await self.model.generate_content_async(
                [system_prompt, user_prompt],
                request_options={"timeout": settings.gemini_timeout},
            )
            text = (response.text or "").strip()
            if not text:
                raise EmptyCompletionError("Gemini returned an empty completion")
        except Exception as e:
            logger.warning(
                "[%s] Gemini attempt failed after %.0fms: %s",
                call_id, (time.perf_counter() - started) * 1000, e,
            )
            raise
        logger.info(
            "[%s] Gemini summary done in %.0fms (%d chars)",
            call_id, (time.perf_counter() - started) * 1000, len(text),
        )
        return text

    async def health_check(self) -> bool:
        """Lists models, which costs no tokens."""
        if not self.is_configured:
            return False
        try:
            available = {m.name for m in genai.list_models()}
        except Exception as e:
            logger.warning("Gemini health check failed: %s", e)
            return False
        if f"models/{self.model_name}" not in available:
            # Reachable, but generate calls will fail
            logger.warning("Gemini model %s is not in the model list", self.model_name)
        return True


# One instance per process so the breaker state is shared by all requests
gemini_service = GeminiService()
