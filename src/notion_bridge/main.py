"""FastAPI application factory.

Creates the app with logging middleware, metrics middleware, Sentry,
lifespan events for the shared function runtime, and the v1 API router.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.requests import Request
from fastapi.responses import Response

from src.notion_bridge.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.notion_bridge.api.v1.router import router as v1_router
from src.notion_bridge.config import get_settings
from src.notion_bridge.core.monitoring import MetricsMiddleware, get_metrics_response, init_sentry
from src.notion_bridge.functions.runtime import FunctionRuntime


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging/Sentry and build the shared runtime."""
    log = structlog.get_logger(__name__)
    settings = get_settings()
    configure_structlog()

    if settings.SENTRY_DSN:
        init_sentry(dsn=settings.SENTRY_DSN, environment=settings.ENVIRONMENT.value)

    if not settings.NOTION_TOKEN:
        log.warning("startup.notion_token_missing")

    # One runtime per process so the Notion user directory cache is shared
    app.state.function_runtime = FunctionRuntime(settings)
    log.info(
        "startup.complete",
        environment=settings.ENVIRONMENT.value,
        user_cache_ttl_seconds=settings.NOTION_USER_CACHE_TTL_SECONDS,
    )

    yield

    log.info("shutdown.complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Notion Item Bridge",
        version="0.1.0",
        description="Slack workflow functions that create and update Notion database items",
        lifespan=lifespan,
    )

    # Middleware is added in reverse order (last added = outermost)

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    # Metrics middleware (outermost -- records Prometheus metrics for all requests)
    app.add_middleware(MetricsMiddleware)

    app.include_router(v1_router)

    # Prometheus metrics endpoint (infrastructure route, outside v1 router)
    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()
