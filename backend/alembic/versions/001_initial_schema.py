"""Initial DiaryPlus schema

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates every DiaryPlus table: users and projects, the journal,
       logs, habits, routines, OKRs, people, the reading list,
       flashcards, memories and collections, feedback, investor updates,
       decisions, the vault and yearbooks.
How:   Generic column types (Uuid, DateTime(timezone=True), JSON) so the
       same revision runs on PostgreSQL and SQLite. Ids and timestamps are
       filled in by the ORM, so there are no server defaults.

Rollback: downgrade() drops all tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# ── Shared columns ────────────────────────────────────────────────────────

def _id() -> sa.Column:
    return sa.Column("id", sa.Uuid(), primary_key=True, comment="Unique identifier")


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _owned() -> list:
    """project_id / user_id pair carried by every project-scoped table."""
    return [
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
    ]


def _owned_indexes(table: str) -> None:
    op.create_index(f"ix_{table}_project_id", table, ["project_id"])
    op.create_index(f"ix_{table}_user_id", table, ["user_id"])


# ── Upgrade ───────────────────────────────────────────────────────────────

def upgrade() -> None:
    # ── Accounts & projects ───────────────────────────────────────────────
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False, comment="Lower-cased login email"),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False),
        sa.Column("default_project_id", sa.Uuid(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "projects",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "owner_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("is_personal", sa.Boolean(), nullable=False),
        sa.Column("private_vault", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_projects_slug", "projects", ["slug"], unique=True)

    op.create_table(
        "project_members",
        _id(),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", sa.String(20), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
    )
    _owned_indexes("project_members")

    op.create_table(
        "project_invitations",
        _id(),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column(
            "invited_by",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_project_invitations_project_id", "project_invitations", ["project_id"])
    op.create_index("ix_project_invitations_token", "project_invitations", ["token"], unique=True)

    # ── Journal ───────────────────────────────────────────────────────────
    op.create_table(
        "life_areas",
        _id(),
        *_owned(),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color", sa.String(7), nullable=False),
        sa.Column("icon", sa.String(16), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    _owned_indexes("life_areas")

    op.create_table(
        "personal_entries",
        _id(),
        *_owned(),
        sa.Column(
            "life_area_id",
            sa.Uuid(),
            sa.ForeignKey("life_areas.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("content", sa.Text(), nullable=False, comment="Plaintext, or vault ciphertext when sealed"),
        sa.Column("mood", sa.Integer(), nullable=True, comment="1-5"),
        sa.Column("energy_level", sa.Integer(), nullable=True, comment="1-5"),
        sa.Column("gratitude_notes", sa.Text(), nullable=True),
        sa.Column("goals_progress", sa.Text(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("is_private", sa.Boolean(), nullable=False),
        sa.Column("entry_type", sa.String(20), nullable=False),
        sa.Column("location_name", sa.String(200), nullable=True),
        sa.Column("is_encrypted", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    _owned_indexes("personal_entries")
    op.create_index("ix_personal_entries_entry_date", "personal_entries", ["entry_date"])

    # ── Logs & reviews ────────────────────────────────────────────────────
    op.create_table(
        "daily_logs",
        _id(),
        *_owned(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content_md", sa.Text(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("mood", sa.Integer(), nullable=True, comment="1-5"),
        sa.Column("time_spent_minutes", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    _owned_indexes("daily_logs")
    op.create_index("ix_daily_logs_date", "daily_logs", ["date"])

    op.create_table(
        "weekly_reviews",
        _id(),
        *_owned(),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("week_end", sa.Date(), nullable=False),
        sa.Column("content_md", sa.Text(), nullable=False),
        sa.Column("ai_summary", sa.Text(), nullable=True),
        *_timestamps(),
    )
    _owned_indexes("weekly_reviews")
    op.create_index("ix_weekly_reviews_week_start", "weekly_reviews", ["week_start"])

    # ── Habits ────────────────────────────────────────────────────────────
    op.create_table(
        "habits",
        _id(),
        *_owned(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("schedule", sa.String(50), nullable=False),
        sa.Column("target_per_week", sa.Integer(), nullable=False),
        sa.Column(
            "area_id",
            sa.Uuid(),
            sa.ForeignKey("life_areas.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("color", sa.String(7), nullable=False),
        sa.Column("icon", sa.String(16), nullable=False),
        sa.Column("archived", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    _owned_indexes("habits")

    op.create_table(
        "habit_logs",
        _id(),
        sa.Column(
            "habit_id",
            sa.Uuid(),
            sa.ForeignKey("habits.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("done", sa.Boolean(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("habit_id", "date", name="uq_habit_logs_habit_date"),
    )
    op.create_index("ix_habit_logs_habit_id", "habit_logs", ["habit_id"])

    # ── Routines ──────────────────────────────────────────────────────────
    op.create_table(
        "routines",
        _id(),
        *_owned(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("target_duration_minutes", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    _owned_indexes("routines")

    op.create_table(
        "routine_steps",
        _id(),
        sa.Column(
            "routine_id",
            sa.Uuid(),
            sa.ForeignKey("routines.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_routine_steps_routine_id", "routine_steps", ["routine_id"])

    op.create_table(
        "routine_logs",
        _id(),
        *_owned(),
        sa.Column(
            "routine_id",
            sa.Uuid(),
            sa.ForeignKey("routines.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_steps", sa.JSON(), nullable=False),
        sa.Column("completion_rate", sa.Integer(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("routine_id", "date", name="uq_routine_logs_routine_date"),
    )
    _owned_indexes("routine_logs")
    op.create_index("ix_routine_logs_routine_id", "routine_logs", ["routine_id"])

    # ── Goals / OKRs ──────────────────────────────────────────────────────
    op.create_table(
        "goals",
        _id(),
        *_owned(),
        sa.Column("objective", sa.String(300), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
    )
    _owned_indexes("goals")

    op.create_table(
        "key_results",
        _id(),
        sa.Column(
            "goal_id",
            sa.Uuid(),
            sa.ForeignKey("goals.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("target", sa.Float(), nullable=False),
        sa.Column("current", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(30), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_key_results_goal_id", "key_results", ["goal_id"])

    # ── People ────────────────────────────────────────────────────────────
    op.create_table(
        "people",
        _id(),
        *_owned(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("aka", sa.String(100), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("birthday", sa.Date(), nullable=True),
        sa.Column("timezone", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("notes_md", sa.Text(), nullable=True),
        sa.Column("relationship_type", sa.String(50), nullable=True),
        sa.Column("importance", sa.Integer(), nullable=False, comment="1-5"),
        *_timestamps(),
    )
    _owned_indexes("people")

    op.create_table(
        "interactions",
        _id(),
        sa.Column(
            "person_id",
            sa.Uuid(),
            sa.ForeignKey("people.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("notes_md", sa.Text(), nullable=True),
        sa.Column("sentiment", sa.Integer(), nullable=True, comment="1-5"),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_interactions_person_id", "interactions", ["person_id"])

    # ── Reading list ──────────────────────────────────────────────────────
    op.create_table(
        "learning_items",
        _id(),
        *_owned(),
        sa.Column("kind", sa.String(20), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("author", sa.String(200), nullable=True),
        sa.Column("source_url", sa.String(2000), nullable=True),
        sa.Column("isbn", sa.String(20), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True, comment="1-5"),
        sa.Column("started_at", sa.Date(), nullable=True),
        sa.Column("finished_at", sa.Date(), nullable=True),
        sa.Column("notes_md", sa.Text(), nullable=True),
        *_timestamps(),
    )
    _owned_indexes("learning_items")

    op.create_table(
        "highlights",
        _id(),
        *_owned(),
        sa.Column(
            "item_id",
            sa.Uuid(),
            sa.ForeignKey("learning_items.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("page_number", sa.Integer(), nullable=True),
        sa.Column("location", sa.String(100), nullable=True),
        *_timestamps(),
    )
    _owned_indexes("highlights")
    op.create_index("ix_highlights_item_id", "highlights", ["item_id"])

    # ── Flashcards ────────────────────────────────────────────────────────
    op.create_table(
        "flashcards",
        _id(),
        *_owned(),
        sa.Column("front", sa.Text(), nullable=False),
        sa.Column("back", sa.Text(), nullable=False),
        sa.Column("deck_name", sa.String(100), nullable=False),
        sa.Column("ease_factor", sa.Float(), nullable=False),
        sa.Column("interval", sa.Integer(), nullable=False, comment="Days"),
        sa.Column("repetitions", sa.Integer(), nullable=False),
        sa.Column("next_review", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_reviewed", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "source_highlight_id",
            sa.Uuid(),
            sa.ForeignKey("highlights.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    _owned_indexes("flashcards")
    op.create_index("ix_flashcards_next_review", "flashcards", ["next_review"])

    # ── Memories & time capsules ──────────────────────────────────────────
    op.create_table(
        "memories",
        _id(),
        *_owned(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("memory_date", sa.Date(), nullable=False),
        sa.Column("location_name", sa.String(200), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("mood", sa.Integer(), nullable=True, comment="1-5"),
        sa.Column("is_favorite", sa.Boolean(), nullable=False),
        sa.Column("is_private", sa.Boolean(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("photo_count", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    _owned_indexes("memories")
    op.create_index("ix_memories_memory_date", "memories", ["memory_date"])

    op.create_table(
        "memory_collections",
        _id(),
        *_owned(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    _owned_indexes("memory_collections")

    op.create_table(
        "memory_collection_items",
        _id(),
        sa.Column(
            "collection_id",
            sa.Uuid(),
            sa.ForeignKey("memory_collections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "memory_id",
            sa.Uuid(),
            sa.ForeignKey("memories.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint(
            "collection_id", "memory_id", name="uq_memory_collection_items_collection_memory"
        ),
    )
    op.create_index(
        "ix_memory_collection_items_collection_id", "memory_collection_items", ["collection_id"]
    )
    op.create_index("ix_memory_collection_items_memory_id", "memory_collection_items", ["memory_id"])

    op.create_table(
        "time_capsules",
        _id(),
        *_owned(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("subject", sa.String(200), nullable=True),
        sa.Column("content_md", sa.Text(), nullable=False),
        sa.Column("deliver_on", sa.Date(), nullable=False),
        sa.Column("target_email", sa.String(255), nullable=False),
        sa.Column("sent", sa.Boolean(), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    _owned_indexes("time_capsules")
    op.create_index("ix_time_capsules_deliver_on", "time_capsules", ["deliver_on"])

    # ── Feedback ──────────────────────────────────────────────────────────
    op.create_table(
        "feedback",
        _id(),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("feedback_type", sa.String(30), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("priority", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("tracking_id", sa.String(20), nullable=False, unique=True),
        sa.Column("user_agent", sa.String(500), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "feedback_votes",
        _id(),
        sa.Column(
            "feedback_id",
            sa.Uuid(),
            sa.ForeignKey("feedback.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("vote_type", sa.String(10), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("feedback_id", "user_id", name="uq_feedback_votes_feedback_user"),
    )
    op.create_index("ix_feedback_votes_feedback_id", "feedback_votes", ["feedback_id"])

    # ── Investor updates & decisions ──────────────────────────────────────
    op.create_table(
        "investor_updates",
        _id(),
        *_owned(),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("content_md", sa.Text(), nullable=False),
        sa.Column("ai_summary", sa.Text(), nullable=True),
        sa.Column("public_slug", sa.String(40), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("project_id", "month", "year", name="uq_investor_updates_period"),
    )
    _owned_indexes("investor_updates")
    op.create_index(
        "ix_investor_updates_public_slug", "investor_updates", ["public_slug"], unique=True
    )

    op.create_table(
        "decisions",
        _id(),
        *_owned(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("context_md", sa.Text(), nullable=False),
        sa.Column("options_md", sa.Text(), nullable=False),
        sa.Column("decision_md", sa.Text(), nullable=False),
        sa.Column("consequences_md", sa.Text(), nullable=False),
        sa.Column("relates_to", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
    )
    _owned_indexes("decisions")

    # ── Private Vault ─────────────────────────────────────────────────────
    op.create_table(
        "vault_configurations",
        _id(),
        *_owned(),
        sa.Column("salt", sa.String(64), nullable=False),
        sa.Column("key_check", sa.Text(), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False),
        sa.Column("setup_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("password_strength_score", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("project_id", "user_id", name="uq_vault_configurations_project_user"),
    )
    _owned_indexes("vault_configurations")

    op.create_table(
        "retention_policies",
        _id(),
        sa.Column(
            "project_id",
            sa.Uuid(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("delete_after_months", sa.Integer(), nullable=False),
        sa.Column("archive_after_months", sa.Integer(), nullable=False),
        sa.Column("notify_before_days", sa.Integer(), nullable=False),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
        *_timestamps(),
    )

    # ── Yearbooks & cron bookkeeping ──────────────────────────────────────
    op.create_table(
        "yearbook_generations",
        _id(),
        *_owned(),
        sa.Column("format", sa.String(10), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("entry_count", sa.Integer(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("filename", sa.String(120), nullable=False),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("download_count", sa.Integer(), nullable=False),
        sa.Column("last_downloaded_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    _owned_indexes("yearbook_generations")
    op.create_index(
        "ix_yearbook_generations_filename", "yearbook_generations", ["filename"], unique=True
    )

    op.create_table(
        "cron_runs",
        _id(),
        sa.Column("job_name", sa.String(50), nullable=False),
        sa.Column("processed", sa.Integer(), nullable=False),
        sa.Column("succeeded", sa.Integer(), nullable=False),
        sa.Column("error", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_cron_runs_job_name", "cron_runs", ["job_name"])


# ── Downgrade ─────────────────────────────────────────────────────────────

TABLES_IN_DROP_ORDER = (
    "cron_runs",
    "yearbook_generations",
    "retention_policies",
    "vault_configurations",
    "decisions",
    "investor_updates",
    "feedback_votes",
    "feedback",
    "time_capsules",
    "memory_collection_items",
    "memory_collections",
    "memories",
    "flashcards",
    "highlights",
    "learning_items",
    "interactions",
    "people",
    "key_results",
    "goals",
    "routine_logs",
    "routine_steps",
    "routines",
    "habit_logs",
    "habits",
    "weekly_reviews",
    "daily_logs",
    "personal_entries",
    "life_areas",
    "project_invitations",
    "project_members",
    "projects",
    "users",
)


def downgrade() -> None:
    """Drop every table, children first. Indexes go with their tables."""
    for table in TABLES_IN_DROP_ORDER:
        op.drop_table(table)
