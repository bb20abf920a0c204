"""
DiaryPlus Backend — Services Layer
====================================

What:  Business rules between the routes (HTTP) and the ORM models.
How:   Stateless classes, one module-level singleton each. Every method
       receives the request's AsyncSession and the caller's user id, checks
       project membership, and returns Pydantic response models.

Service Inventory:
    - auth_service:       password hashing, JWT issue/verify, signup/signin
    - project_service:    projects, membership checks, invitations, onboarding
    - life_area_service, journal_service, log_service, habit_service,
      routine_service, goal_service, people_service, learning_service,
      memory_service, feedback_service, investor_update_service,
      decision_service: per-resource CRUD
    - vault_service:      key derivation, entry sealing, retention policy
    - yearbook_service:   PDF/EPUB compilation of journal entries
    - export_service:     markdown zip export
    - llm_base / gemini_service / summary_service: AI summaries with fallback
"""
