"""Repository layer: all SQL for the scheduling engine lives here."""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .catalog_repository import CatalogRepository
from .notification_log_repository import NotificationLogRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "CatalogRepository",
    "NotificationLogRepository",
]
