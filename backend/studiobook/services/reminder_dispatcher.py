# backend/studiobook/services/reminder_dispatcher.py
"""
Day-before reminder batch.

Safe to run repeatedly for the same day: a booking whose reminder is
already recorded as sent in the notification log is skipped, and the
partial unique index on the log makes concurrent runs record at most one
delivery per booking. A single delivery failure never stops the batch.
"""

from dataclasses import asdict, dataclass
from datetime import date
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import RepositoryException, StorageException
from ..core.timezone_utils import business_tomorrow
from ..models.booking import ACTIVE_STATUSES
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.booking_repository import BookingRepository
from ..repositories.notification_log_repository import NotificationLogRepository
from .base import BaseService
from .notification_service import DeliveryOutcome, NotificationService

logger = logging.getLogger(__name__)


@dataclass
class ReminderRunResult:
    target_date: date
    total: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["target_date"] = self.target_date.isoformat()
        return data


def reminder_log_kind() -> str:
    return f"{settings.reminder_kind}_reminder"


class ReminderDispatcher(BaseService):
    """Sends reminders for tomorrow's pending and confirmed bookings."""

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        booking_repository: Optional[BookingRepository] = None,
        log_repository: Optional[NotificationLogRepository] = None,
    ):
        super().__init__(db)
        self.notification_service = notification_service or NotificationService(db)
        self.booking_repository = booking_repository or BookingRepository(db)
        self.log_repository = log_repository or NotificationLogRepository(db)

    @BaseService.measure_operation("run_daily_reminders")
    def run_daily_reminders(self, target_date: Optional[date] = None) -> ReminderRunResult:
        """
        Remind every customer with a pending or confirmed booking on ``target_date``.

        ``target_date`` defaults to tomorrow in the business timezone.

        Raises:
            StorageException: the booking ledger could not be queried at all
        """
        target_date = target_date or business_tomorrow()
        kind = reminder_log_kind()
        result = ReminderRunResult(target_date=target_date)

        try:
            bookings = self.booking_repository.get_bookings_for_date(target_date, ACTIVE_STATUSES)
            already_sent = self.log_repository.get_sent_booking_ids(
                [booking.id for booking in bookings], kind
            )
        except RepositoryException as e:
            self.logger.error(f"Reminder run for {target_date} could not load bookings: {e}")
            raise StorageException(f"Failed to load bookings for reminders: {e}") from e

        result.total = len(bookings)
        self.logger.info(
            f"Reminder run for {target_date}: {result.total} bookings, "
            f"{len(already_sent)} already reminded"
        )

        for booking in bookings:
            if booking.id in already_sent:
                result.skipped += 1
                continue
            try:
                outcome = self.notification_service.send_booking_reminder(booking, kind)
            except Exception as e:
                self.logger.error(f"Error sending reminder for booking {booking.id}: {str(e)}")
                outcome = DeliveryOutcome.FAILED

            if outcome is DeliveryOutcome.SENT:
                result.sent += 1
            elif outcome is DeliveryOutcome.DUPLICATE:
                result.skipped += 1
            else:
                result.failed += 1

        prometheus_metrics.inc_reminder("sent", result.sent)
        prometheus_metrics.inc_reminder("failed", result.failed)
        prometheus_metrics.inc_reminder("skipped", result.skipped)
        self.log_operation("reminders_dispatched", **result.to_dict())
        return result
