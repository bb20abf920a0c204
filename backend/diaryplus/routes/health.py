"""
DiaryPlus Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database (critical) and the Gemini summarizer (optional).

Status levels:
    - healthy:   database reachable, AI available
    - degraded:  database reachable, AI unconfigured, unreachable or its
                 circuit open (summaries fall back to built-in markdown)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from diaryplus import __version__
from diaryplus.database import engine
from diaryplus.schemas.common import HealthResponse
from diaryplus.services.gemini_service import gemini_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    ai_status = "available"
    overall = "healthy"

    # ── Database ──────────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Gemini ────────────────────────────────────────────────────────────
    if not gemini_service.is_configured:
        ai_status = "not_configured"
    elif gemini_service.circuit_breaker.is_open:
        ai_status = "circuit_open"
    elif not await gemini_service.health_check():
        ai_status = "unavailable"

    if ai_status != "available" and overall == "healthy":
        overall = "degraded"
    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        ai=ai_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
