"""Service layer for the scheduling engine."""

from .booking_service import BookingService
from .notification_service import NotificationService
from .reminder_dispatcher import ReminderDispatcher
from .slot_generator import SlotGenerator

__all__ = ["BookingService", "NotificationService", "ReminderDispatcher", "SlotGenerator"]
