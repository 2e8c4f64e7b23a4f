"""Pydantic schemas for the send-email endpoint and dispatcher results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

MAX_RECIPIENTS = 20
MAX_SUBJECT_CHARS = 200
MAX_BODY_CHARS = 50_000

DEFAULT_EMAIL_SUBJECT = "Meeting Summary"


def split_recipients(value: str) -> list[str]:
    """Split a comma-separated recipient string, dropping blank entries."""
    return [part.strip() for part in value.split(",") if part.strip()]


class EmailRequest(BaseModel):
    """Request schema for sending a summary to a list of recipients.

    ``to`` accepts either a list of addresses or a single comma-separated
    string. Recipient order is preserved and duplicates are kept.
    """

    model_config = ConfigDict(populate_by_name=True)

    recipients: list[EmailStr] = Field(
        ...,
        alias="to",
        min_length=1,
        max_length=MAX_RECIPIENTS,
        description="Recipient email addresses",
    )
    subject: str | None = Field(
        default=None,
        max_length=MAX_SUBJECT_CHARS,
        validate_default=True,
        description="Email subject; defaults to 'Meeting Summary'",
    )
    body: str = Field(..., max_length=MAX_BODY_CHARS, description="Plain-text email body")

    @field_validator("recipients", mode="before")
    @classmethod
    def _normalize_recipients(cls, value: Any) -> Any:
        if isinstance(value, str):
            return split_recipients(value)
        return value

    @field_validator("subject")
    @classmethod
    def _default_subject(cls, value: str | None) -> str:
        return value or DEFAULT_EMAIL_SUBJECT


class TransportResult(BaseModel):
    """What an email transport reports after attempting a send."""

    success: bool
    failed_recipients: list[str] = Field(default_factory=list)
    error: str | None = None


class EmailOutcome(BaseModel):
    """Aggregate result of dispatching one email to every recipient.

    ``overall_success`` is False only when the send aborted as a whole.
    Individual recipient failures are listed in ``failed_recipients`` in
    input order and can coexist with ``overall_success=True``.
    """

    overall_success: bool
    recipients: list[str] = Field(default_factory=list)
    failed_recipients: list[str] = Field(default_factory=list)
    error_detail: str | None = None

    @property
    def all_failed(self) -> bool:
        return bool(self.recipients) and len(self.failed_recipients) >= len(self.recipients)
