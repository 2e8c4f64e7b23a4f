"""Normalization of generative-provider failures.

Provider exceptions arrive in whatever shape the client library and the
upstream API produce. This module maps them onto the closed
ProviderErrorKind taxonomy by matching on the message text and on any
HTTP-style status attribute. Matching is heuristic; unknown shapes fall
through to ProviderErrorKind.UNKNOWN.
"""

from __future__ import annotations

import asyncio

import structlog

from src.recap.pipeline.errors import ProviderError, ProviderErrorKind

logger = structlog.get_logger(__name__)

_CREDENTIAL_MARKERS = (
    "api_key_invalid",
    "api key not valid",
    "invalid api key",
    "permission_denied",
    "authenticationerror",
)
_RATE_LIMIT_MARKERS = (
    "rate_limit_exceeded",
    "resource_exhausted",
    "rate limit",
    "ratelimit",
    "quota",
)
_CONTENT_MARKERS = (
    "safety",
    "content policy",
    "contentpolicyviolation",
    "content_filter",
    "blocked",
)

MESSAGES: dict[ProviderErrorKind, str] = {
    ProviderErrorKind.INVALID_CREDENTIALS: (
        "Invalid Google API key. Please check your GOOGLE_API_KEY configuration."
    ),
    ProviderErrorKind.RATE_LIMITED: (
        "AI provider rate limit exceeded. Please try again later."
    ),
    ProviderErrorKind.CONTENT_REJECTED: (
        "Content blocked by safety filters. Please rephrase or remove sensitive content."
    ),
    ProviderErrorKind.PROVIDER_FAULT: (
        "AI provider server error. Please try again later."
    ),
}


def _status_of(exc: BaseException) -> int | None:
    for attr in ("status_code", "status", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.isdigit():
            return int(value)
    return None


def classify(message: str, status: int | None = None) -> ProviderErrorKind:
    """Map a provider message and optional status code to a kind."""
    text = message.lower()

    if any(marker in text for marker in _CREDENTIAL_MARKERS) or status in (401, 403):
        return ProviderErrorKind.INVALID_CREDENTIALS
    if any(marker in text for marker in _RATE_LIMIT_MARKERS) or status == 429:
        return ProviderErrorKind.RATE_LIMITED
    if any(marker in text for marker in _CONTENT_MARKERS):
        return ProviderErrorKind.CONTENT_REJECTED
    if status is not None and (status >= 500 or status == 408):
        return ProviderErrorKind.PROVIDER_FAULT
    return ProviderErrorKind.UNKNOWN


def normalize_provider_error(exc: BaseException) -> ProviderError:
    """Convert any exception raised by the provider call into a ProviderError.

    The returned error's ``message`` never contains the raw payload for
    credential failures; ``original_message`` keeps it for logging.
    """
    original = str(exc) or exc.__class__.__name__

    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        kind = ProviderErrorKind.PROVIDER_FAULT
    else:
        kind = classify(f"{exc.__class__.__name__}: {original}", _status_of(exc))

    message = MESSAGES.get(kind) or f"AI summarization failed: {original}"

    logger.warning(
        "provider_error_normalized",
        kind=kind.value,
        exception_type=exc.__class__.__name__,
    )
    return ProviderError(kind=kind, message=message, original_message=original)
