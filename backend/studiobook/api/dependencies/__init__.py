# backend/studiobook/api/dependencies/__init__.py
"""
Central export point for all dependencies.
"""

from .auth import get_current_user, require_admin, verify_cron_secret
from .database import get_db
from .services import (
    get_booking_service,
    get_notification_service,
    get_reminder_dispatcher,
    get_slot_generator,
)

__all__ = [
    # Auth
    "get_current_user",
    "require_admin",
    "verify_cron_secret",
    # Database
    "get_db",
    # Services
    "get_booking_service",
    "get_notification_service",
    "get_reminder_dispatcher",
    "get_slot_generator",
]
