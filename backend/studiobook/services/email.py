# backend/studiobook/services/email.py
"""
Outbound email transports.

``EmailService`` sends through the Resend API; ``ConsoleEmailService`` logs
the message instead and is the default outside production. Both raise
NotificationException on failure so the notification layer can record it.
"""

import logging
import re
from typing import Any, Dict, Optional, Union

import resend

from ..core.config import settings
from ..core.exceptions import NotificationException

logger = logging.getLogger(__name__)


def html_to_text(html_content: str) -> str:
    """Convert HTML content to plain text for better deliverability."""
    text = re.sub(r"<[^>]+>", "", html_content)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


class EmailService:
    """Service for sending emails using the Resend API."""

    def __init__(self, api_key: Optional[str] = None, from_email: Optional[str] = None):
        api_key = api_key or settings.resend_api_key
        if not api_key:
            raise NotificationException("Resend API key not configured")

        resend.api_key = api_key
        self.from_email = from_email or settings.from_email
        self.logger = logging.getLogger(self.__class__.__name__)

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send an email using Resend.

        Raises:
            NotificationException: If the provider rejects or fails the send
        """
        email_data = {
            "from": self.from_email,
            "to": to_email,
            "subject": subject,
            "html": html_content,
            "text": text_content or html_to_text(html_content),
        }
        try:
            response = resend.Emails.send(email_data)
        except Exception as e:
            error_msg = str(e) or type(e).__name__
            self.logger.error(f"Failed to send email to {to_email}: {error_msg}")
            raise NotificationException(f"Email sending failed: {error_msg}") from e

        self.logger.info(f"Email sent successfully to {to_email} - Subject: {subject}")
        return dict(response) if response else {}


class ConsoleEmailService:
    """Email transport that writes messages to the log instead of sending them."""

    def __init__(self, from_email: Optional[str] = None):
        self.from_email = from_email or settings.from_email
        self.logger = logging.getLogger(self.__class__.__name__)

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        self.logger.info(
            "[console email] to=%s subject=%s\n%s",
            to_email,
            subject,
            text_content or html_to_text(html_content),
        )
        return {"id": "console", "to": to_email}


EmailTransport = Union[EmailService, ConsoleEmailService]


def get_email_service() -> EmailTransport:
    """Build the transport selected by ``settings.email_provider``."""
    if settings.email_provider == "resend":
        return EmailService()
    return ConsoleEmailService()
