"""
DiaryPlus Backend — Gemini Provider Tests
===========================================

The google-generativeai SDK is patched out everywhere; nothing here talks
to the network.

What we test:
    ✅ Breaker transitions: closed → open → half_open → closed/open
    ✅ Successful summary returns stripped model text
    ✅ Missing key, API errors and empty completions become LLMServiceError
    ✅ An open breaker short-circuits without calling the model
    ✅ health_check never raises
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from diaryplus.exceptions import CircuitBreakerOpenError, LLMServiceError
from diaryplus.services.gemini_service import CircuitBreaker, GeminiService


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return CircuitBreaker(failure_threshold=3, recovery_timeout=60, clock=clock)


def trip(cb):
    for _ in range(cb.failure_threshold):
        cb.record_failure()


class TestCircuitBreaker:

    def test_starts_closed(self, breaker):
        assert breaker.state == CircuitBreaker.CLOSED
        assert breaker.is_open is False
        assert breaker.can_execute() is True

    def test_failures_below_threshold_keep_it_closed(self, breaker):
        breaker.record_failure()
        breaker.record_failure()
        assert breaker.state == CircuitBreaker.CLOSED
        assert breaker.failure_count == 2

    def test_opens_and_reports_remaining_time(self, breaker, clock):
        trip(breaker)
        assert breaker.is_open is True

        clock.now += 45
        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            breaker.can_execute()
        assert exc_info.value.recovery_time == 15

    def test_half_open_after_cool_down(self, breaker, clock):
        trip(breaker)
        clock.now += 60

        assert breaker.is_open is False
        assert breaker.can_execute() is True
        assert breaker.state == CircuitBreaker.HALF_OPEN

    def test_trial_success_closes(self, breaker, clock):
        trip(breaker)
        clock.now += 61
        breaker.can_execute()

        breaker.record_success()
        assert breaker.state == CircuitBreaker.CLOSED
        assert breaker.failure_count == 0

    def test_trial_failure_reopens_with_fresh_cool_down(self, breaker, clock):
        trip(breaker)
        clock.now += 61
        breaker.can_execute()

        breaker.record_failure()
        assert breaker.state == CircuitBreaker.OPEN
        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            breaker.can_execute()
        assert exc_info.value.recovery_time == 60

    def test_success_resets_count(self, breaker):
        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()
        breaker.record_failure()
        assert breaker.state == CircuitBreaker.CLOSED


# ── Provider ──────────────────────────────────────────────────────────────

@pytest.fixture
def mock_genai():
    with patch("diaryplus.services.gemini_service.genai") as genai:
        yield genai


def service_returning(**model_kwargs):
    service = GeminiService(api_key="test-key")
    service.model = MagicMock()
    service.model.generate_content_async = AsyncMock(**model_kwargs)
    return service


def completion(text):
    response = MagicMock()
    response.text = text
    return response


class TestGeminiService:

    @pytest.mark.asyncio
    async def test_returns_stripped_text(self, mock_genai):
        service = service_returning(return_value=completion("  ## Week 12\n- shipped billing \n"))

        assert await service.summarize("system", "logs") == "## Week 12\n- shipped billing"
        args, kwargs = service.model.generate_content_async.await_args
        assert args[0] == ["system", "logs"]
        assert "timeout" in kwargs["request_options"]

    @pytest.mark.asyncio
    async def test_placeholder_key_is_not_configured(self, mock_genai):
        service = GeminiService(api_key="your_gemini_api_key_here")
        assert service.is_configured is False
        mock_genai.configure.assert_not_called()

        with pytest.raises(LLMServiceError, match="not configured"):
            await service.summarize("system", "logs")

    @pytest.mark.asyncio
    async def test_api_error_counts_against_breaker(self, mock_genai):
        service = service_returning(side_effect=RuntimeError("quota exceeded"))

        with pytest.raises(LLMServiceError) as exc_info:
            await service.summarize("system", "logs")
        assert exc_info.value.context["error_type"] == "RuntimeError"
        assert exc_info.value.retry_after == service.circuit_breaker.recovery_timeout
        assert service.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_empty_completion_is_a_failure(self, mock_genai):
        service = service_returning(return_value=completion("   "))

        with pytest.raises(LLMServiceError) as exc_info:
            await service.summarize("system", "logs")
        assert exc_info.value.context["error_type"] == "EmptyCompletionError"

    @pytest.mark.asyncio
    async def test_open_breaker_skips_the_model(self, mock_genai):
        service = service_returning(return_value=completion("never"))
        trip(service.circuit_breaker)

        with pytest.raises(CircuitBreakerOpenError):
            await service.summarize("system", "logs")
        service.model.generate_content_async.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_health_check(self, mock_genai):
        model = MagicMock()
        model.name = "models/some-other-model"
        mock_genai.list_models.return_value = [model]
        assert await GeminiService(api_key="test-key").health_check() is True

        mock_genai.list_models.side_effect = ConnectionError("offline")
        assert await GeminiService(api_key="test-key").health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_without_key(self, mock_genai):
        assert await GeminiService(api_key="").health_check() is False
        mock_genai.list_models.assert_not_called()
