"""Health check endpoints.

Provides liveness (/health) and readiness (/health/ready) checks.
Readiness reports whether the generative provider key and the email
transport are configured.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from src.recap.config import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic liveness check.

    No external dependencies are checked -- just that the server is running.
    """
    settings = get_settings()
    return {"status": "ok", "environment": settings.ENVIRONMENT.value}


def _check_dependencies(request: Request) -> dict:
    """Report configuration state of the provider and email transport."""
    checks: dict = {"summarizer": "ok", "email": "ok"}

    generator = getattr(request.app.state, "summary_generator", None)
    if generator is None:
        checks["summarizer"] = "error"
    elif not generator.is_configured:
        checks["summarizer"] = "no_keys"

    dispatcher = getattr(request.app.state, "email_dispatcher", None)
    if dispatcher is None:
        checks["email"] = "error"
    elif not dispatcher.is_configured:
        checks["email"] = "not_configured"

    return checks


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness check: 200 when both pipelines can run, 503 otherwise."""
    checks = _check_dependencies(request)
    all_healthy = all(value == "ok" for value in checks.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if all_healthy else "degraded",
            "checks": checks,
        },
    )
