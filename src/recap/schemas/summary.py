"""Pydantic schemas for the summarize endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

MAX_TRANSCRIPT_CHARS = 200_000
MAX_INSTRUCTION_CHARS = 2_000

DEFAULT_INSTRUCTION = "Provide a structured summary"
NO_CONTENT_SENTINEL = "No substantial content found."


class SummarizationRequest(BaseModel):
    """Request schema for transcript summarization.

    Field names on the wire are camelCase (``transcriptText``,
    ``customPrompt``).
    """

    model_config = ConfigDict(populate_by_name=True)

    transcript_text: str = Field(
        ...,
        alias="transcriptText",
        max_length=MAX_TRANSCRIPT_CHARS,
        description="Meeting transcript, verbatim",
    )
    custom_instruction: str = Field(
        default="",
        alias="customPrompt",
        max_length=MAX_INSTRUCTION_CHARS,
        description="Optional instruction for the summary; defaults when empty",
    )

    @property
    def effective_instruction(self) -> str:
        return self.custom_instruction or DEFAULT_INSTRUCTION


class SummarizationResult(BaseModel):
    """Response schema for a generated summary."""

    summary: str = Field(..., min_length=1, description="Generated summary text")
