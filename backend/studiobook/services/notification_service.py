# backend/studiobook/services/notification_service.py
"""
Notification service for the studio booking platform.

``send(to, template, data)`` renders a Jinja2 template, hands it to the
configured email transport and appends a row to the notification log.
Delivery failures are logged and reported as False; they never propagate
to the operation that triggered the notification.
"""

from enum import Enum
import logging
from typing import Any, Dict, Optional

from jinja2 import TemplateError
from sqlalchemy.orm import Session

from ..core.constants import (
    NOTIFICATION_BOOKING_CANCELLATION,
    NOTIFICATION_BOOKING_CONFIRMATION,
    NOTIFICATION_BOOKING_RECEIVED,
    NOTIFICATION_BOOKING_REMINDER,
)
from ..core.enums import NotificationStatus
from ..core.exceptions import NotificationException, StorageException
from ..models.booking import Booking
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.notification_log_repository import NotificationLogRepository
from .base import BaseService
from .email import EmailTransport, get_email_service
from .template_service import TemplateService

logger = logging.getLogger(__name__)


class DeliveryOutcome(str, Enum):
    SENT = "sent"
    DUPLICATE = "duplicate"  # delivered, but another run already recorded it
    FAILED = "failed"


class NotificationService(BaseService):
    """Central notification service using Jinja2 templates."""

    def __init__(
        self,
        db: Session,
        email_service: Optional[EmailTransport] = None,
        template_service: Optional[TemplateService] = None,
        log_repository: Optional[NotificationLogRepository] = None,
    ) -> None:
        super().__init__(db)
        self.email_service = email_service or get_email_service()
        self.template_service = template_service or TemplateService()
        self.log_repository = log_repository or NotificationLogRepository(db)

    @BaseService.measure_operation("deliver_notification")
    def deliver(
        self,
        to: str,
        template: str,
        data: Dict[str, Any],
        *,
        booking_id: Optional[str] = None,
        kind: Optional[str] = None,
    ) -> DeliveryOutcome:
        """
        Render, send and log one notification.

        ``kind`` is the log key (defaults to the template name). Never raises
        for delivery problems; the outcome says what happened.
        """
        kind = kind or template
        subject = self.template_service.subject_for(template)
        try:
            html_content = self.template_service.render_template(template, data)
            self.email_service.send_email(to_email=to, subject=subject, html_content=html_content)
        except (NotificationException, TemplateError) as e:
            self.logger.error(f"Notification {kind} to {to} failed: {str(e)}")
            prometheus_metrics.record_notification(kind, NotificationStatus.FAILED.value)
            self._log_failure(kind, to, booking_id, subject, str(e))
            return DeliveryOutcome.FAILED

        prometheus_metrics.record_notification(kind, NotificationStatus.SENT.value)
        recorded = self._log_sent(kind, to, booking_id, subject)
        self.log_operation("notification_sent", template=template, to=to, booking_id=booking_id)
        return DeliveryOutcome.SENT if recorded else DeliveryOutcome.DUPLICATE

    def send(self, to: str, template: str, data: Dict[str, Any], **kwargs: Any) -> bool:
        """Collaborator contract: True on successful delivery."""
        return self.deliver(to, template, data, **kwargs) is not DeliveryOutcome.FAILED

    def _log_sent(
        self, kind: str, recipient: str, booking_id: Optional[str], subject: str
    ) -> bool:
        try:
            with self.transaction():
                return self.log_repository.record_sent(
                    kind=kind, recipient=recipient, booking_id=booking_id, subject=subject
                )
        except StorageException as e:
            # The message went out; losing the log row only weakens reminder dedup.
            self.logger.error(f"Could not record sent {kind} for booking {booking_id}: {e}")
            return True

    def _log_failure(
        self,
        kind: str,
        recipient: str,
        booking_id: Optional[str],
        subject: str,
        error_message: str,
    ) -> None:
        try:
            with self.transaction():
                self.log_repository.record_failure(
                    kind=kind,
                    recipient=recipient,
                    booking_id=booking_id,
                    subject=subject,
                    error_message=error_message,
                )
        except StorageException as e:
            self.logger.error(f"Could not record failed {kind} for booking {booking_id}: {e}")

    # Booking notifications

    def _send_for_booking(
        self, booking: Booking, template: str, kind: Optional[str] = None
    ) -> DeliveryOutcome:
        return self.deliver(
            booking.customer_email,
            template,
            {"booking": booking.to_dict()},
            booking_id=booking.id,
            kind=kind,
        )

    def notify_booking_received(self, booking: Booking) -> bool:
        return self._send_for_booking(booking, NOTIFICATION_BOOKING_RECEIVED) is not DeliveryOutcome.FAILED

    def notify_booking_confirmed(self, booking: Booking) -> bool:
        return (
            self._send_for_booking(booking, NOTIFICATION_BOOKING_CONFIRMATION)
            is not DeliveryOutcome.FAILED
        )

    def notify_booking_cancelled(self, booking: Booking) -> bool:
        return (
            self._send_for_booking(booking, NOTIFICATION_BOOKING_CANCELLATION)
            is not DeliveryOutcome.FAILED
        )

    def send_booking_reminder(self, booking: Booking, kind: str) -> DeliveryOutcome:
        return self._send_for_booking(booking, NOTIFICATION_BOOKING_REMINDER, kind=kind)
