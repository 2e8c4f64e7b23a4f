"""Caller-facing response shapes for both pipelines.

Every builder returns a PipelineResponse (status code plus JSON body). The
HTTP layer wraps it unchanged; nothing here knows about FastAPI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.recap.pipeline.errors import (
    EmptyContentError,
    InputValidationError,
    ProviderError,
    ProviderErrorKind,
    ProviderNotConfiguredError,
)
from src.recap.schemas.email import EmailOutcome
from src.recap.schemas.summary import SummarizationResult

EMAIL_SUCCESS_MESSAGE = "Email sent successfully"
INTERNAL_ERROR_MESSAGE = "Internal server error"

_EMPTY_CONTENT_MESSAGES = {
    "transcriptText": "Transcript text is required",
    "body": "Email body is required",
}

PROVIDER_STATUS: dict[ProviderErrorKind, int] = {
    ProviderErrorKind.INVALID_CREDENTIALS: 400,
    ProviderErrorKind.CONTENT_REJECTED: 400,
    ProviderErrorKind.RATE_LIMITED: 503,
    ProviderErrorKind.PROVIDER_FAULT: 503,
    ProviderErrorKind.UNKNOWN: 500,
}


@dataclass
class PipelineResponse:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


# ── Shared ───────────────────────────────────────────────────────────────────


def validation_failure(exc: InputValidationError, *, email: bool = False) -> PipelineResponse:
    body: dict[str, Any] = {"error": "Invalid input", "details": exc.issues}
    if email:
        body["ok"] = False
    return PipelineResponse(400, body)


def empty_content(exc: EmptyContentError, *, email: bool = False) -> PipelineResponse:
    body: dict[str, Any] = {
        "error": _EMPTY_CONTENT_MESSAGES.get(exc.field, f"{exc.field} is required"),
    }
    if email:
        body["ok"] = False
    return PipelineResponse(400, body)


def internal_error(*, email: bool = False) -> PipelineResponse:
    body: dict[str, Any] = {"error": INTERNAL_ERROR_MESSAGE}
    if email:
        body["ok"] = False
    return PipelineResponse(500, body)


# ── Summarize ────────────────────────────────────────────────────────────────


def summary_success(result: SummarizationResult) -> PipelineResponse:
    return PipelineResponse(200, {"summary": result.summary})


def summary_failure(exc: ProviderError) -> PipelineResponse:
    return PipelineResponse(PROVIDER_STATUS.get(exc.kind, 500), {"error": exc.message})


def provider_not_configured(exc: ProviderNotConfiguredError) -> PipelineResponse:
    return PipelineResponse(500, {"error": str(exc)})


# ── Send email ───────────────────────────────────────────────────────────────


def email_outcome(outcome: EmailOutcome) -> PipelineResponse:
    """Translate a dispatcher outcome.

    Partial failure stays a 200 with ``ok: true``; the failed addresses are
    appended to the message. A send where every recipient failed is
    reported as a failure even though the dispatcher itself succeeded.
    """
    if not outcome.overall_success:
        return PipelineResponse(
            500,
            {"error": outcome.error_detail or "Failed to send email", "ok": False},
        )

    if outcome.all_failed:
        return PipelineResponse(
            502,
            {
                "error": "Failed to send email to any recipient: "
                + ", ".join(outcome.failed_recipients),
                "ok": False,
            },
        )

    message = EMAIL_SUCCESS_MESSAGE
    if outcome.failed_recipients:
        message += f". Failed to send to: {', '.join(outcome.failed_recipients)}"
    return PipelineResponse(200, {"message": message, "ok": True})
