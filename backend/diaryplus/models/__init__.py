"""
DiaryPlus Backend — ORM Models
================================

Importing this package registers every table with Base.metadata, which
Alembic autogenerate and the test suite's create_all rely on.
"""

from diaryplus.models.cron_run import CronRun
from diaryplus.models.daily_log import DailyLog, WeeklyReview
from diaryplus.models.decision import Decision
from diaryplus.models.feedback import Feedback, FeedbackVote
from diaryplus.models.flashcard import Flashcard
from diaryplus.models.goal import Goal, KeyResult
from diaryplus.models.habit import Habit, HabitLog
from diaryplus.models.investor_update import InvestorUpdate
from diaryplus.models.journal import JournalEntry
from diaryplus.models.life_area import LifeArea
from diaryplus.models.learning import Highlight, LearningItem
from diaryplus.models.memory import Memory, MemoryCollection, MemoryCollectionItem, TimeCapsule
from diaryplus.models.person import Interaction, Person
from diaryplus.models.project import Project, ProjectInvitation, ProjectMember
from diaryplus.models.routine import Routine, RoutineLog, RoutineStep
from diaryplus.models.user import User
from diaryplus.models.vault import RetentionPolicy, VaultConfiguration
from diaryplus.models.yearbook import YearbookGeneration

__all__ = [
    "CronRun",
    "DailyLog",
    "Decision",
    "Feedback",
    "FeedbackVote",
    "Flashcard",
    "Goal",
    "Habit",
    "HabitLog",
    "Highlight",
    "Interaction",
    "InvestorUpdate",
    "JournalEntry",
    "KeyResult",
    "LearningItem",
    "LifeArea",
    "Memory",
    "MemoryCollection",
    "MemoryCollectionItem",
    "Person",
    "Project",
    "ProjectInvitation",
    "ProjectMember",
    "RetentionPolicy",
    "Routine",
    "RoutineLog",
    "RoutineStep",
    "TimeCapsule",
    "User",
    "VaultConfiguration",
    "WeeklyReview",
    "YearbookGeneration",
]
