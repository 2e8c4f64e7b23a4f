"""End-to-end pipeline runners.

Each runner validates raw input, performs the single external call, and
turns every outcome (including unexpected exceptions) into a
PipelineResponse. Nothing raised below this boundary reaches the caller.
"""

from __future__ import annotations

from typing import Any

import structlog

from src.recap.emails.dispatcher import EmailDispatcher
from src.recap.pipeline import responses
from src.recap.pipeline.errors import (
    EmptyContentError,
    InputValidationError,
    ProviderError,
    ProviderNotConfiguredError,
)
from src.recap.pipeline.responses import PipelineResponse
from src.recap.pipeline.validation import validate_email_request, validate_summarization_request
from src.recap.summaries.generator import SummaryGenerator

logger = structlog.get_logger(__name__)


async def run_summarize(payload: Any, generator: SummaryGenerator) -> PipelineResponse:
    """Validate, summarize, and format the summarize response."""
    try:
        request = validate_summarization_request(payload)
        result = await generator.summarize(request)
    except InputValidationError as exc:
        logger.info("summarize_rejected", issues=len(exc.issues))
        return responses.validation_failure(exc)
    except EmptyContentError as exc:
        logger.info("summarize_rejected_empty", field=exc.field)
        return responses.empty_content(exc)
    except ProviderNotConfiguredError as exc:
        logger.error("summarize_provider_not_configured")
        return responses.provider_not_configured(exc)
    except ProviderError as exc:
        logger.warning(
            "summarize_provider_failed",
            kind=exc.kind.value,
            original_message=exc.original_message[:500],
        )
        return responses.summary_failure(exc)
    except Exception:
        logger.exception("summarize_unexpected_error")
        return responses.internal_error()

    return responses.summary_success(result)


async def run_send_email(payload: Any, dispatcher: EmailDispatcher) -> PipelineResponse:
    """Validate, dispatch, and format the send-email response."""
    try:
        request = validate_email_request(payload)
        outcome = await dispatcher.dispatch(request)
    except InputValidationError as exc:
        logger.info("send_email_rejected", issues=len(exc.issues))
        return responses.validation_failure(exc, email=True)
    except EmptyContentError as exc:
        logger.info("send_email_rejected_empty", field=exc.field)
        return responses.empty_content(exc, email=True)
    except Exception:
        logger.exception("send_email_unexpected_error")
        return responses.internal_error(email=True)

    return responses.email_outcome(outcome)
