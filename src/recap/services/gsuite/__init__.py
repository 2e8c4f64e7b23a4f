"""GSuite integration for sending email through the Gmail API.

Uses Google service account authentication with domain-wide delegation.
"""

from src.recap.services.gsuite.auth import GSuiteAuthManager
from src.recap.services.gsuite.gmail import GmailService
from src.recap.services.gsuite.models import EmailMessage, SentEmailResult

__all__ = [
    "EmailMessage",
    "GmailService",
    "GSuiteAuthManager",
    "SentEmailResult",
]
