"""
DiaryPlus Backend — Summary Service
=====================================

What:  Builds weekly reviews and investor updates from daily logs and goals.
How:   Formats the material into a prompt for the LLM provider. When the
       provider is not configured, its circuit is open or it fails after
       retries, a deterministic markdown summary is produced instead, so
       summary generation never fails the request.
"""

import calendar
import logging
from typing import List, Optional, Sequence

from diaryplus.exceptions import CircuitBreakerOpenError, LLMServiceError
from diaryplus.models.daily_log import DailyLog
from diaryplus.models.goal import Goal
from diaryplus.rounding import round_half_up
from diaryplus.services.gemini_service import gemini_service
from diaryplus.services.llm_base import LLMService

logger = logging.getLogger(__name__)

WEEKLY_SYSTEM_PROMPT = """You are a helpful assistant that summarizes daily founder logs into weekly reviews.
Focus on:
- Top 3 wins/accomplishments
- 1-3 key blockers or challenges
- Next week's priorities
- Overall progress and momentum
Keep it concise but insightful. Answer in markdown."""

INVESTOR_SYSTEM_PROMPT = """You are writing a monthly investor update for a startup founder.
Structure it with:
- Executive Summary
- Key Metrics
- Major Milestones
- Challenges & Risks
- Next Month Goals
- Ask (what help you need)
Keep it professional, concise, and data-driven. Answer in markdown."""


def distinct_tags(logs: Sequence[DailyLog], limit: int) -> List[str]:
    """First `limit` distinct tags in log order."""
    seen: List[str] = []
    for log in logs:
        for tag in log.tags or []:
            if tag not in seen:
                seen.append(tag)
    return seen[:limit]


def fallback_weekly_summary(logs: Sequence[DailyLog]) -> str:
    if not logs:
        return "No logs found for this period."

    total_minutes = sum(log.time_spent_minutes or 0 for log in logs)
    moods = [log.mood for log in logs if log.mood]
    avg_mood = f"{sum(moods) / len(moods):.1f}" if moods else "N/A"
    top_tags = distinct_tags(logs, 5)
    highlights = "\n".join(f"- {log.title}" for log in logs[:3])

    return (
        "# Weekly Summary\n\n"
        "## Overview\n"
        f"- **{len(logs)} log entries** over the week\n"
        f"- **{round_half_up(total_minutes / 60)} hours** total time logged\n"
        f"- **Average mood**: {avg_mood}/5\n"
        f"- **Top activities**: {', '.join(top_tags)}\n\n"
        "## Key Highlights\n"
        f"{highlights}\n\n"
        "## Focus Areas\n"
        f"Based on your tags: {', '.join(top_tags[:3])}\n\n"
        "*This summary was generated automatically. "
        "Configure GEMINI_API_KEY for more detailed insights.*"
    )


def fallback_investor_update(
    logs: Sequence[DailyLog], goals: Sequence[Goal], month: int, year: int
) -> str:
    month_year = f"{calendar.month_name[month]} {year}"
    milestones = "\n".join(f"- {log.title}" for log in logs[:5]) or "- No logged milestones this month"
    goal_lines = "\n".join(
        f"- **{goal.objective}**: {len(goal.key_results or [])} key results tracked" for goal in goals
    ) or "- No active objectives"

    return (
        f"# Monthly Update - {month_year}\n\n"
        "## Executive Summary\n"
        f"This month we logged {len(logs)} work sessions across {len(goals)} objectives.\n\n"
        "## Key Metrics\n"
        f"- **Activity**: {len(logs)} logged work sessions\n"
        f"- **Goals**: {len(goals)} active objectives\n"
        f"- **Focus Areas**: {', '.join(distinct_tags(logs, 5))}\n\n"
        "## Major Milestones\n"
        f"{milestones}\n\n"
        "## Goals Progress\n"
        f"{goal_lines}\n\n"
        "## Next Month Focus\n"
        "- Continue execution on current objectives\n"
        "- Address any blockers identified in daily logs\n"
        "- Maintain momentum on key initiatives\n\n"
        "## Ask\n"
        "- Feedback on current strategy\n"
        "- Introductions to potential customers/partners\n"
        "- Guidance on scaling challenges\n\n"
        "---\n"
        "*This update was generated automatically from your daily logs and goals.*"
    )


class SummaryService:
    """Prompt building plus fallback around an LLMService."""

    def __init__(self, llm: Optional[LLMService] = None):
        self.llm = llm or gemini_service

    async def weekly_review(self, logs: Sequence[DailyLog]) -> str:
        if not logs:
            return fallback_weekly_summary(logs)

        logs_text = "\n---\n".join(
            f"**{log.date.isoformat()}** - {log.title}\n{log.content_md}\n"
            f"Tags: {', '.join(log.tags or [])}\nMood: {log.mood or 'N/A'}/5\n"
            for log in logs
        )
        prompt = f"Please summarize these daily logs into a weekly review:\n\n{logs_text}"
        return await self._generate(WEEKLY_SYSTEM_PROMPT, prompt, lambda: fallback_weekly_summary(logs))

    async def investor_update(
        self, logs: Sequence[DailyLog], goals: Sequence[Goal], month: int, year: int
    ) -> str:
        activity = "\n".join(f"- {log.date.isoformat()}: {log.title}" for log in logs[:10])
        progress = "\n".join(
            f"- {goal.objective}: {len(goal.key_results or [])} key results" for goal in goals
        )
        prompt = (
            f"Generate a monthly investor update for {calendar.month_name[month]} {year} "
            f"based on this data:\n\n"
            f"Recent Activity ({len(logs)} entries):\n{activity}\n\n"
            f"Goals Progress:\n{progress}\n"
        )
        return await self._generate(
            INVESTOR_SYSTEM_PROMPT, prompt, lambda: fallback_investor_update(logs, goals, month, year)
        )

    async def _generate(self, system_prompt: str, user_prompt: str, fallback) -> str:
        if not self.llm.is_configured:
            logger.info("AI provider not configured, using fallback summary")
            return fallback()
        try:
            return await self.llm.summarize(system_prompt, user_prompt)
        except (LLMServiceError, CircuitBreakerOpenError) as e:
            logger.warning("AI summary unavailable (%s), using fallback summary", e.message)
            return fallback()


summary_service = SummaryService()
