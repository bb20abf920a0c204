"""
DiaryPlus Backend — Summary Service Unit Tests
================================================

What:  Weekly review / investor update drafting.
How:   The LLM provider is a mock; fallbacks are checked against real
       (unsaved) DailyLog and Goal objects.

What we test:
    ✅ Deterministic markdown fallbacks
    ✅ Provider output used when available
    ✅ Provider errors and an open circuit fall back instead of failing
"""

import datetime as dt

import pytest
from unittest.mock import AsyncMock, MagicMock

from diaryplus.exceptions import CircuitBreakerOpenError, LLMServiceError
from diaryplus.models.daily_log import DailyLog
from diaryplus.models.goal import Goal, KeyResult
from diaryplus.services.summary_service import (
    SummaryService,
    distinct_tags,
    fallback_investor_update,
    fallback_weekly_summary,
)


def make_log(day, title, tags=(), mood=None, minutes=0):
    return DailyLog(
        date=dt.date(2024, 6, day),
        title=title,
        content_md=f"Worked on {title.lower()}",
        tags=list(tags),
        mood=mood,
        time_spent_minutes=minutes,
    )


@pytest.fixture
def week_logs():
    return [
        make_log(3, "Shipped onboarding", ["product", "growth"], mood=4, minutes=240),
        make_log(4, "Investor calls", ["fundraising"], mood=3, minutes=120),
        make_log(5, "Fixed billing bug", ["product", "eng"], mood=5, minutes=180),
        make_log(6, "Hiring loop", ["hiring"], minutes=60),
    ]


class TestFallbacks:

    def test_empty_week(self):
        assert fallback_weekly_summary([]) == "No logs found for this period."

    def test_weekly_summary_figures(self, week_logs):
        text = fallback_weekly_summary(week_logs)
        assert "**4 log entries**" in text
        assert "**10 hours** total time logged" in text
        assert "**Average mood**: 4.0/5" in text
        assert "- Shipped onboarding\n- Investor calls\n- Fixed billing bug\n" in text
        assert "Hiring loop" not in text.split("## Key Highlights")[1].split("## Focus Areas")[0]

    def test_weekly_summary_rounds_half_hours_up(self):
        text = fallback_weekly_summary([make_log(1, "Long day", minutes=150)])
        assert "**3 hours** total time logged" in text

    def test_weekly_summary_without_moods(self):
        text = fallback_weekly_summary([make_log(1, "Quiet day")])
        assert "**Average mood**: N/A/5" in text

    def test_distinct_tags_keep_first_seen_order(self, week_logs):
        assert distinct_tags(week_logs, 5) == ["product", "growth", "fundraising", "eng", "hiring"]
        assert distinct_tags(week_logs, 2) == ["product", "growth"]

    def test_investor_update_fallback(self, week_logs):
        goal = Goal(objective="Reach $10k MRR", status="active")
        goal.key_results = [KeyResult(name="MRR", target=10000, current=4200)]
        text = fallback_investor_update(week_logs, [goal], 6, 2024)

        assert text.startswith("# Monthly Update - June 2024")
        assert "logged 4 work sessions across 1 objectives" in text
        assert "- **Reach $10k MRR**: 1 key results tracked" in text

    def test_investor_update_fallback_without_data(self):
        text = fallback_investor_update([], [], 1, 2025)
        assert "# Monthly Update - January 2025" in text
        assert "- No logged milestones this month" in text
        assert "- No active objectives" in text


class TestSummaryService:

    def _llm(self, configured=True, **summarize_kwargs):
        llm = MagicMock()
        llm.is_configured = configured
        llm.summarize = AsyncMock(**summarize_kwargs)
        return llm

    @pytest.mark.asyncio
    async def test_uses_provider_output(self, week_logs):
        llm = self._llm(return_value="## AI review")
        service = SummaryService(llm=llm)

        assert await service.weekly_review(week_logs) == "## AI review"
        system_prompt, user_prompt = llm.summarize.await_args.args
        assert "weekly reviews" in system_prompt
        assert "**2024-06-03** - Shipped onboarding" in user_prompt

    @pytest.mark.asyncio
    async def test_unconfigured_provider_uses_fallback(self, week_logs):
        llm = self._llm(configured=False)
        text = await SummaryService(llm=llm).weekly_review(week_logs)

        assert text.startswith("# Weekly Summary")
        llm.summarize.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_week_never_calls_provider(self):
        llm = self._llm(return_value="unused")
        assert await SummaryService(llm=llm).weekly_review([]) == "No logs found for this period."
        llm.summarize.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [LLMServiceError(message="boom"), CircuitBreakerOpenError(recovery_time=30)],
    )
    async def test_provider_failure_falls_back(self, week_logs, error):
        llm = self._llm(side_effect=error)
        text = await SummaryService(llm=llm).weekly_review(week_logs)
        assert text.startswith("# Weekly Summary")

    @pytest.mark.asyncio
    async def test_investor_prompt_mentions_period(self, week_logs):
        llm = self._llm(return_value="# Update")
        await SummaryService(llm=llm).investor_update(week_logs, [], 6, 2024)
        _, user_prompt = llm.summarize.await_args.args
        assert "June 2024" in user_prompt
        assert "Recent Activity (4 entries)" in user_prompt
