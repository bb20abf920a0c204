"""
DiaryPlus Backend — Middleware Package
========================================

Cross-cutting concerns applied to every request.

Middleware Chain (first to run → last):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    Rate limiting runs first so abusive clients are rejected before any work;
    the request ID is assigned before logging so every access line carries it.
"""
