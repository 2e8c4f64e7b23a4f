"""Input validation for both pipelines.

Schema checks are delegated to the pydantic request models; this module
adds the semantic non-blank checks that schema validation alone would let
through, and converts pydantic errors into the issue list callers see.
"""

from __future__ import annotations

from typing import Any

import pydantic

from src.recap.pipeline.errors import EmptyContentError, InputValidationError
from src.recap.schemas.email import EmailRequest
from src.recap.schemas.summary import SummarizationRequest


def _issues_from(exc: pydantic.ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "path": list(err["loc"]),
            "message": err["msg"],
            "code": err["type"],
        }
        for err in exc.errors()
    ]


def _require_object(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise InputValidationError(
            [{"path": [], "message": "Request body must be a JSON object", "code": "dict_type"}]
        )
    return payload


def validate_summarization_request(payload: Any) -> SummarizationRequest:
    """Validate raw summarize input.

    Raises:
        InputValidationError: Missing transcript or a field over its limit.
        EmptyContentError: Transcript is blank after trimming.
    """
    try:
        request = SummarizationRequest.model_validate(_require_object(payload))
    except pydantic.ValidationError as exc:
        raise InputValidationError(_issues_from(exc)) from exc

    if not request.transcript_text.strip():
        raise EmptyContentError("transcriptText")
    return request


def validate_email_request(payload: Any) -> EmailRequest:
    """Validate raw send-email input.

    ``to`` may be a list or a comma-separated string; both produce the same
    recipient list.

    Raises:
        InputValidationError: Bad addresses, recipient count outside 1..20,
            or subject/body over their limits.
        EmptyContentError: Body is blank after trimming.
    """
    try:
        request = EmailRequest.model_validate(_require_object(payload))
    except pydantic.ValidationError as exc:
        raise InputValidationError(_issues_from(exc)) from exc

    if not request.body.strip():
        raise EmptyContentError("body")
    return request
