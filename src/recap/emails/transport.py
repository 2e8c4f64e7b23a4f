"""Email transports used by the dispatcher.

A transport takes one message and a list of recipients and reports which
recipients could not be reached. It returns ``success=False`` only when
the service itself is unusable (no credentials, authentication rejected,
connection refused). Per-recipient errors are reported in
``failed_recipients``.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import structlog
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from src.recap.config import Settings
from src.recap.pipeline.errors import TransportSystemicError
from src.recap.schemas.email import TransportResult
from src.recap.services.gsuite import EmailMessage, GmailService, GSuiteAuthManager

logger = structlog.get_logger(__name__)

_AUTH_STATUSES = (401, 403)


class EmailTransport(Protocol):
    async def send(self, to: list[str], subject: str, body: str) -> TransportResult: ...


class GmailTransport:
    """Sends one Gmail message per recipient, in input order.

    Args:
        gmail_service: GmailService bound to the sending mailbox.
        sender_name: Display name for the From header.
        timeout: Seconds allowed for each recipient's send. A recipient
            whose send runs past it is reported as failed.
    """

    def __init__(
        self,
        gmail_service: GmailService,
        sender_name: str | None = None,
        timeout: float = 30,
    ) -> None:
        self._gmail = gmail_service
        self._sender_name = sender_name
        self._timeout = timeout

    async def send(self, to: list[str], subject: str, body: str) -> TransportResult:
        try:
            return await self._send_all(to, subject, body)
        except TransportSystemicError as exc:
            logger.error("email_transport_unavailable", detail=exc.detail)
            return TransportResult(success=False, error=exc.detail)

    async def _send_all(self, to: list[str], subject: str, body: str) -> TransportResult:
        try:
            self._gmail.get_service()
        except (GoogleAuthError, OSError, ValueError) as exc:
            raise TransportSystemicError(
                "Email service authentication failed. Check the Google service account configuration."
            ) from exc

        failed: list[str] = []
        for recipient in to:
            message = EmailMessage(
                to=recipient,
                subject=subject,
                body_text=body,
                sender_name=self._sender_name,
            )
            try:
                await asyncio.wait_for(self._gmail.send_email(message), timeout=self._timeout)
            except GoogleAuthError as exc:
                raise TransportSystemicError(
                    "Email service rejected the sender credentials."
                ) from exc
            except HttpError as exc:
                if exc.resp.status in _AUTH_STATUSES:
                    raise TransportSystemicError(
                        "Email service rejected the sender credentials."
                    ) from exc
                logger.warning("email_recipient_failed", to=recipient, status=exc.resp.status)
                failed.append(recipient)
            except asyncio.TimeoutError:
                logger.warning("email_recipient_timed_out", to=recipient, timeout=self._timeout)
                failed.append(recipient)
            except ConnectionError as exc:
                raise TransportSystemicError("Email service is unreachable.") from exc
            except Exception:
                logger.warning("email_recipient_failed", to=recipient, exc_info=True)
                failed.append(recipient)
            else:
                logger.info("email_recipient_delivered", to=recipient)

        return TransportResult(success=True, failed_recipients=failed)


def build_transport(settings: Settings) -> GmailTransport | None:
    """Build the configured transport, or None when no service account is set."""
    sa_path = settings.get_service_account_path()
    if not sa_path or not settings.GOOGLE_DELEGATED_USER_EMAIL:
        logger.warning("No Google service account configured -- email sending will be unavailable")
        return None

    auth = GSuiteAuthManager(
        service_account_file=sa_path,
        delegated_user_email=settings.GOOGLE_DELEGATED_USER_EMAIL,
    )
    gmail = GmailService(
        auth_manager=auth,
        default_user_email=settings.GOOGLE_DELEGATED_USER_EMAIL,
    )
    return GmailTransport(
        gmail,
        sender_name=settings.EMAIL_SENDER_NAME,
        timeout=settings.EMAIL_TIMEOUT,
    )
