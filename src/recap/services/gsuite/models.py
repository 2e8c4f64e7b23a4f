"""Pydantic schemas for Gmail messages."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EmailMessage(BaseModel):
    """Email message to send via Gmail API."""

    to: str
    subject: str
    body_text: str
    body_html: str | None = None
    sender_name: str | None = None


class SentEmailResult(BaseModel):
    """Result from sending an email via Gmail API."""

    message_id: str
    thread_id: str
    label_ids: list[str] = Field(default_factory=list)
