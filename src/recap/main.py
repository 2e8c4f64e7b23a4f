"""FastAPI application factory.

Creates the app with logging middleware, metrics middleware, CORS, Sentry,
lifespan events that build the summarization and email services, and the
API router.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.requests import Request
from fastapi.responses import Response

from src.recap.api.middleware.cors import RoutePreflightCORSMiddleware
from src.recap.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.recap.api.v1.router import router as v1_router
from src.recap.config import get_settings
from src.recap.core.monitoring import MetricsMiddleware, get_metrics_response, init_sentry
from src.recap.emails.dispatcher import EmailDispatcher
from src.recap.emails.transport import build_transport
from src.recap.summaries.generator import SummaryGenerator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging and Sentry, build services."""
    log = structlog.get_logger(__name__)
    settings = get_settings()
    configure_structlog()

    if settings.SENTRY_DSN:
        init_sentry(dsn=settings.SENTRY_DSN, environment=settings.ENVIRONMENT.value)

    # Services may already be set (tests inject fakes before startup)
    if getattr(app.state, "summary_generator", None) is None:
        app.state.summary_generator = SummaryGenerator.from_settings(settings)

    if getattr(app.state, "email_dispatcher", None) is None:
        try:
            transport = build_transport(settings)
        except Exception:
            log.warning("email_transport_init_failed", exc_info=True)
            transport = None
        app.state.email_dispatcher = EmailDispatcher(transport)

    log.info(
        "services_initialized",
        model=settings.MODEL_ID,
        summarizer_configured=app.state.summary_generator.is_configured,
        email_configured=app.state.email_dispatcher.is_configured,
    )

    yield

    log.info("shutdown_complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Meeting Recap API",
        version="0.1.0",
        description="Summarize meeting transcripts and email the summary",
        lifespan=lifespan,
    )

    # Middleware is added in reverse order (last added = outermost)

    # CORS headers for actual requests; OPTIONS preflight is answered by the routes
    app.add_middleware(
        RoutePreflightCORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["POST"],
        allow_headers=["Content-Type"],
    )

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    # Metrics middleware (outermost -- records Prometheus metrics for all requests)
    app.add_middleware(MetricsMiddleware)

    app.include_router(v1_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()
