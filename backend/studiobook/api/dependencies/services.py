# backend/studiobook/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each request gets services bound to its own database session.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.booking_service import BookingService
from ...services.email import EmailTransport, get_email_service
from ...services.notification_service import NotificationService
from ...services.reminder_dispatcher import ReminderDispatcher
from ...services.slot_generator import SlotGenerator
from .database import get_db

logger = logging.getLogger(__name__)


def get_email_transport() -> EmailTransport:
    return get_email_service()


def get_notification_service(
    db: Session = Depends(get_db),
    email_service: EmailTransport = Depends(get_email_transport),
) -> NotificationService:
    return NotificationService(db, email_service=email_service)


def get_slot_generator(db: Session = Depends(get_db)) -> SlotGenerator:
    return SlotGenerator(db)


def get_booking_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> BookingService:
    """
    Get booking service instance with all dependencies.

    Args:
        db: Database session
        notification_service: Notification service for customer emails
    """
    return BookingService(db, notification_service)


def get_reminder_dispatcher(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> ReminderDispatcher:
    return ReminderDispatcher(db, notification_service)
