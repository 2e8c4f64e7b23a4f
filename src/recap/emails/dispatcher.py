"""EmailDispatcher -- deliver one message to many recipients.

Each recipient resolves independently to delivered or failed; a recipient
whose send times out is one of the failed. The dispatch only fails as a
whole when the transport is missing, cannot authenticate, is unreachable,
or raises. A send where some (or even all) recipients failed still
reports ``overall_success=True`` with the failed addresses listed in input
order; deciding how to present that to the caller is the response
formatter's job.

Exports:
    EmailDispatcher: Main dispatch service.
"""

from __future__ import annotations

import structlog

from src.recap.core.monitoring import record_email_dispatch
from src.recap.emails.transport import EmailTransport
from src.recap.schemas.email import EmailOutcome, EmailRequest

logger = structlog.get_logger(__name__)

NOT_CONFIGURED_DETAIL = "Email transport not configured"
DEFAULT_FAILURE_DETAIL = "Failed to send email"


class EmailDispatcher:
    """Dispatches validated email requests through a transport.

    Args:
        transport: Object exposing ``send(to, subject, body)``. None means
            email is not configured and every dispatch fails systemically.
    """

    def __init__(self, transport: EmailTransport | None) -> None:
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return self._transport is not None

    async def dispatch(self, request: EmailRequest) -> EmailOutcome:
        recipients = [str(r) for r in request.recipients]

        if self._transport is None:
            return self._systemic_failure(recipients, NOT_CONFIGURED_DETAIL)

        try:
            result = await self._transport.send(recipients, request.subject, request.body)
        except Exception:
            logger.error("email_transport_raised", recipient_count=len(recipients), exc_info=True)
            return self._systemic_failure(recipients, DEFAULT_FAILURE_DETAIL)

        if not result.success:
            return self._systemic_failure(recipients, result.error or DEFAULT_FAILURE_DETAIL)

        # Keep input order and duplicates; ignore addresses the transport
        # reports that were never requested.
        reported = set(result.failed_recipients)
        failed = [r for r in recipients if r in reported]

        record_email_dispatch(True, delivered=len(recipients) - len(failed), failed=len(failed))
        log = logger.warning if failed else logger.info
        log(
            "email_dispatched",
            recipient_count=len(recipients),
            failed_count=len(failed),
            subject=request.subject,
        )
        return EmailOutcome(
            overall_success=True,
            recipients=recipients,
            failed_recipients=failed,
        )

    def _systemic_failure(self, recipients: list[str], detail: str) -> EmailOutcome:
        record_email_dispatch(False, delivered=0, failed=0)
        logger.error("email_dispatch_failed", recipient_count=len(recipients), detail=detail)
        return EmailOutcome(
            overall_success=False,
            recipients=recipients,
            failed_recipients=[],
            error_detail=detail,
        )
