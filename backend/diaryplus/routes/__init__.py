"""
DiaryPlus Backend — API Routes Package
========================================

Route Inventory:
    - auth.py:              /api/auth/*, /api/user/* (sessions, onboarding)
    - projects.py:          /api/projects, invitations
    - life_areas.py:        /api/life-areas
    - journal.py:           /api/personal/entries
    - logs.py:              /api/logs, /api/weekly
    - habits.py:            /api/habits
    - routines.py:          /api/personal/routines
    - goals.py:             /api/goals, /api/key-results
    - people.py:            /api/people
    - flashcards.py:        /api/flashcards, /api/flashcards/from-highlights
    - learning.py:          /api/learning/items, /api/learning/highlights
    - memories.py:          /api/memories, collections, time capsules,
                            /api/cron/time-capsules
    - feedback.py:          /api/feedback
    - investor_updates.py:  /api/investor-updates, /api/public/updates
    - decisions.py:         /api/decisions
    - vault.py:             /api/vault
    - yearbook.py:          /api/yearbook
    - export.py:            /api/export/markdown
    - health.py:            /health

Routes are thin: they read the request, resolve the caller through
dependencies.py and hand everything else to a service.
"""
