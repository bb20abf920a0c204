"""
DiaryPlus Backend — Application Package
=======================================

What: REST backend for a founder "life-and-startup" journal: projects,
      daily logs, habits, routines, goals, people, flashcards, memories,
      feedback, investor updates, decisions, vault and yearbook exports.
Who:  Imported by uvicorn (`diaryplus.main:app`), Alembic and pytest.

Layers:

    ┌─────────────────────────────────────┐
    │   Routes (HTTP, auth dependencies)  │
    ├─────────────────────────────────────┤
    │   Services (rules, access checks)   │
    ├─────────────────────────────────────┤
    │   Models (SQLAlchemy) / Schemas     │
    ├─────────────────────────────────────┤
    │   Database (async sessions)         │
    └─────────────────────────────────────┘

    Every project-owned row is reachable only through a membership check
    in the service layer (see services/project_service.py).
"""

__version__ = "1.0.0"
