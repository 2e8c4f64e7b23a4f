"""SummaryGenerator -- single-call transcript summarization via litellm.

Composes the prompt, makes exactly one provider call with the configured
generation parameters, and returns a non-empty summary. Provider failures
are handed to the error normalizer and re-raised as ProviderError. There
is no retry loop here; retry policy belongs to the caller.

Exports:
    SummaryGenerator: Summarization service built from Settings.
"""

from __future__ import annotations

import asyncio

import litellm
import structlog

from src.recap.config import Settings
from src.recap.core.monitoring import track_llm_call
from src.recap.pipeline.errors import (
    ProviderError,
    ProviderErrorKind,
    ProviderNotConfiguredError,
)
from src.recap.schemas.summary import (
    NO_CONTENT_SENTINEL,
    SummarizationRequest,
    SummarizationResult,
)
from src.recap.summaries.prompts import compose_prompt
from src.recap.summaries.provider_errors import MESSAGES, normalize_provider_error

logger = structlog.get_logger(__name__)

# litellm reports a safety block as a normal response with this finish reason
CONTENT_FILTER_FINISH_REASON = "content_filter"


class SummaryGenerator:
    """Generates meeting summaries with the configured generative model.

    Args:
        api_key: Provider credential. Empty means not configured.
        model: litellm model identifier, e.g. ``gemini/gemini-2.0-flash``.
        temperature: Sampling temperature.
        max_output_tokens: Upper bound on generated tokens.
        timeout: Seconds before the provider call is abandoned.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float = 0.3,
        max_output_tokens: int = 2048,
        timeout: float = 30,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout

        if not api_key:
            logger.warning("No GOOGLE_API_KEY configured -- summarization will be unavailable")

    @classmethod
    def from_settings(cls, settings: Settings) -> SummaryGenerator:
        return cls(
            api_key=settings.GOOGLE_API_KEY,
            model=settings.MODEL_ID,
            temperature=settings.MODEL_TEMPERATURE,
            max_output_tokens=settings.MODEL_MAX_OUTPUT_TOKENS,
            timeout=settings.LLM_TIMEOUT,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def summarize(self, request: SummarizationRequest) -> SummarizationResult:
        """Summarize a validated transcript.

        Returns:
            SummarizationResult whose summary is the stripped model output,
            or the no-content sentinel when the model returned nothing.

        Raises:
            ProviderNotConfiguredError: No API key; no call is attempted.
            ProviderError: The provider call failed, timed out, or the
                response was blocked by the content filter.
        """
        if not self._api_key:
            raise ProviderNotConfiguredError()

        prompt = compose_prompt(request.transcript_text, request.effective_instruction)
        text = await self._generate(prompt)

        if not text or not text.strip():
            logger.info("summary_empty_using_sentinel", model=self.model)
            return SummarizationResult(summary=NO_CONTENT_SENTINEL)

        summary = text.strip()
        logger.info(
            "summary_generated",
            model=self.model,
            transcript_chars=len(request.transcript_text),
            summary_chars=len(summary),
        )
        return SummarizationResult(summary=summary)

    async def _generate(self, prompt: str) -> str | None:
        """Make the single provider call and return the raw text."""
        try:
            async with track_llm_call(self.model) as tracker:
                response = await asyncio.wait_for(
                    litellm.acompletion(
                        model=self.model,
                        messages=[{"role": "user", "content": prompt}],
                        temperature=self.temperature,
                        max_tokens=self.max_output_tokens,
                        api_key=self._api_key,
                        timeout=self.timeout,
                        num_retries=0,
                    ),
                    timeout=self.timeout,
                )
                usage = getattr(response, "usage", None)
                if usage:
                    tracker["prompt_tokens"] = getattr(usage, "prompt_tokens", 0) or 0
                    tracker["completion_tokens"] = getattr(usage, "completion_tokens", 0) or 0
        except Exception as exc:
            logger.warning("summary_provider_call_failed", model=self.model, exc_info=True)
            raise normalize_provider_error(exc) from exc

        if not response.choices:
            return None
        choice = response.choices[0]
        if getattr(choice, "finish_reason", None) == CONTENT_FILTER_FINISH_REASON:
            logger.warning("summary_content_filtered", model=self.model)
            raise ProviderError(
                ProviderErrorKind.CONTENT_REJECTED,
                MESSAGES[ProviderErrorKind.CONTENT_REJECTED],
                f"finish_reason={CONTENT_FILTER_FINISH_REASON}",
            )
        return choice.message.content
