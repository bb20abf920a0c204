"""
DiaryPlus Backend — Markdown Export
=====================================

What:  Packs a project's founder data into a zip of markdown files.

Archive layout:
    README.md
    daily-logs/<date>-<title-slug>.md
    weekly-reviews/<week_start>_to_<week_end>.md
    goals-okrs/<objective-slug>.md          key results as a table
    investor-updates/<YYYY>-<MM>-investor-update.md
"""

import calendar
import io
import logging
import uuid
import zipfile
from dataclasses import dataclass
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diaryplus.config import settings
from diaryplus.database import utcnow
from diaryplus.models.daily_log import DailyLog, WeeklyReview
from diaryplus.models.goal import Goal, KeyResult
from diaryplus.models.investor_update import InvestorUpdate
from diaryplus.models.project import Project
from diaryplus.rounding import round_half_up
from diaryplus.services.project_service import require_membership, slugify

logger = logging.getLogger(__name__)


@dataclass
class ExportArchive:
    content: bytes
    filename: str
    file_count: int


def _unique(name: str, used: Dict[str, int]) -> str:
    """Append -2, -3... when two items map to the same file name."""
    count = used.get(name, 0) + 1
    used[name] = count
    if count == 1:
        return name
    stem, ext = name.rsplit(".", 1)
    return f"{stem}-{count}.{ext}"


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def render_log(log: DailyLog) -> str:
    mood = f"{log.mood}/5" if log.mood is not None else "N/A"
    return (
        f"# {log.title}\n\n"
        f"**Date:** {log.date.isoformat()}\n"
        f"**Tags:** {', '.join(log.tags or [])}\n"
        f"**Mood:** {mood}\n"
        f"**Time Spent:** {log.time_spent_minutes or 0} minutes\n\n"
        f"{log.content_md}\n"
    )


def render_review(review: WeeklyReview) -> str:
    return (
        f"# Weekly Review: {review.week_start.isoformat()} to {review.week_end.isoformat()}\n\n"
        f"{review.content_md}\n\n"
        "---\n"
        f"*Generated on: {review.created_at.date().isoformat()}*\n"
    )


def render_goal(goal: Goal) -> str:
    lines = [
        f"# Goal: {goal.objective}",
        "",
        f"**Status:** {goal.status}",
        f"**Due Date:** {goal.due_date.isoformat() if goal.due_date else 'No due date set'}",
        "",
        "## Key Results",
        "",
    ]
    key_results = list(goal.key_results or [])
    if not key_results:
        lines.append("No key results defined")
    else:
        lines.append("| Key Result | Current | Target | Unit | Progress |")
        lines.append("|---|---|---|---|---|")
        for kr in key_results:
            lines.append(
                f"| {kr.name} | {_format_number(kr.current)} | {_format_number(kr.target)} "
                f"| {kr.unit or ''} | {key_result_progress(kr)}% |"
            )
    return "\n".join(lines) + "\n"


def key_result_progress(kr: KeyResult) -> int:
    if not kr.target:
        return 0
    return min(100, round_half_up(kr.current / kr.target * 100))


def render_investor_update(update: InvestorUpdate) -> str:
    lines = [
        f"# Investor Update - {calendar.month_name[update.month]} {update.year}",
        "",
        update.content_md,
        "",
        "---",
        f"**Public:** {'Yes' if update.is_public else 'No'}",
    ]
    if update.is_public:
        lines.append(
            f"**Public URL:** {settings.public_base_url.rstrip('/')}/public/{update.public_slug}"
        )
    return "\n".join(lines) + "\n"


def render_readme(project: Project) -> str:
    now = utcnow()
    return (
        f"# {project.name} - Founder Diary Export\n\n"
        f'This export contains the founder diary data for the project "{project.name}".\n\n'
        "## Contents\n\n"
        "- **daily-logs/**: daily log entries\n"
        "- **weekly-reviews/**: generated weekly summaries\n"
        "- **goals-okrs/**: objectives and key results\n"
        "- **investor-updates/**: monthly investor updates\n\n"
        f"Generated on {now.strftime('%Y-%m-%d %H:%M')} UTC\n"
    )


class ExportService:
    async def export_markdown(
        self, db: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> ExportArchive:
        await require_membership(db, project_id, user_id)
        project = await db.get(Project, project_id)

        logs = await db.execute(
            select(DailyLog)
            .where(DailyLog.project_id == project_id)
            .order_by(DailyLog.date, DailyLog.created_at)
        )
        reviews = await db.execute(
            select(WeeklyReview)
            .where(WeeklyReview.project_id == project_id)
            .order_by(WeeklyReview.week_start)
        )
        goals = await db.execute(
            select(Goal).where(Goal.project_id == project_id).order_by(Goal.created_at)
        )
        updates = await db.execute(
            select(InvestorUpdate)
            .where(InvestorUpdate.project_id == project_id)
            .order_by(InvestorUpdate.year, InvestorUpdate.month)
        )

        used: Dict[str, int] = {}
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("README.md", render_readme(project))
            for log in logs.scalars().all():
                name = f"daily-logs/{log.date.isoformat()}-{slugify(log.title, fallback='log')}.md"
                archive.writestr(_unique(name, used), render_log(log))
            for review in reviews.scalars().all():
                name = (
                    f"weekly-reviews/{review.week_start.isoformat()}"
                    f"_to_{review.week_end.isoformat()}.md"
                )
                archive.writestr(_unique(name, used), render_review(review))
            for goal in goals.scalars().all():
                name = f"goals-okrs/{slugify(goal.objective, fallback='goal')}.md"
                archive.writestr(_unique(name, used), render_goal(goal))
            for update in updates.scalars().all():
                name = f"investor-updates/{update.year:04d}-{update.month:02d}-investor-update.md"
                archive.writestr(_unique(name, used), render_investor_update(update))
            file_count = len(archive.namelist())

        logger.info("Markdown export for project %s: %d files", project_id, file_count)
        return ExportArchive(
            content=buffer.getvalue(),
            filename=f"{project.slug}-export.zip",
            file_count=file_count,
        )


export_service = ExportService()
