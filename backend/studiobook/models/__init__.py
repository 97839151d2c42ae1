"""
Database models for the studio booking platform.

- Service and Staff: reference data read by the scheduling engine
- Booking: the authoritative ledger
- NotificationLog: append-only record of outbound notifications
"""

from .booking import Booking, BookingStatus
from .notification_log import NotificationLog
from .service import Service
from .staff import Staff, StaffWorkingHours, staff_services

__all__ = [
    "Booking",
    "BookingStatus",
    "NotificationLog",
    "Service",
    "Staff",
    "StaffWorkingHours",
    "staff_services",
]
