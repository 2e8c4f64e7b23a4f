"""Error taxonomy shared by the summarize and send-email pipelines.

Every error the pipelines expect to see derives from RecapError. The
runners in src.recap.pipeline.runner are the only place these are turned
into caller-facing responses.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class RecapError(Exception):
    """Base class for all expected pipeline failures."""


class InputValidationError(RecapError):
    """Caller input is malformed or out of bounds.

    Attributes:
        issues: Field-level problems, each a dict with ``path``,
            ``message`` and ``code`` keys.
    """

    def __init__(self, issues: list[dict[str, Any]]) -> None:
        self.issues = issues
        super().__init__(f"Invalid input ({len(issues)} issue(s))")


class EmptyContentError(RecapError):
    """Input passed schema validation but is blank after trimming."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} must contain non-whitespace text")


class ProviderNotConfiguredError(RecapError):
    """The generative provider credential is missing from configuration."""

    def __init__(self) -> None:
        super().__init__(
            "AI provider is not configured. Set GOOGLE_API_KEY in the environment."
        )


class ProviderErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    RATE_LIMITED = "rate_limited"
    CONTENT_REJECTED = "content_rejected"
    PROVIDER_FAULT = "provider_fault"
    UNKNOWN = "unknown"


class ProviderError(RecapError):
    """A normalized failure reported by the generative provider.

    ``message`` is safe to show to the caller. ``original_message`` keeps
    the provider's own text for logs only.
    """

    def __init__(self, kind: ProviderErrorKind, message: str, original_message: str = "") -> None:
        self.kind = kind
        self.message = message
        self.original_message = original_message
        super().__init__(message)


class TransportSystemicError(RecapError):
    """The email transport could not be reached or authenticated at all."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)
