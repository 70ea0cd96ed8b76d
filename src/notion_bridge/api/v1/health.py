"""Health check endpoints.

Provides liveness (/health) and readiness (/health/ready). Readiness only
checks configuration: the Notion token must be present for any function
call to succeed. Remote APIs are not probed.
"""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from src.notion_bridge.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic liveness check. No external dependencies are checked."""
    settings = get_settings()
    return {"status": "ok", "environment": settings.ENVIRONMENT.value}


@router.get("/health/ready")
async def readiness_check():
    """Readiness check: verifies the credentials the functions need.

    Returns 200 when NOTION_TOKEN is set, 503 otherwise. A missing Slack
    token only degrades user mapping, so it is reported but not fatal.
    """
    settings = get_settings()
    checks = {
        "notion_token": "ok" if settings.NOTION_TOKEN else "missing",
        "slack_token": "ok" if settings.SLACK_BOT_TOKEN else "missing",
    }
    ready = checks["notion_token"] == "ok"

    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "degraded",
            "checks": checks,
        },
    )
