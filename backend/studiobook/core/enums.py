# backend/studiobook/core/enums.py
"""
Core enums for the studio booking platform.

Roles come from the identity token; the engine only distinguishes between
staff administrators and customers.
"""

from enum import Enum


class RoleName(str, Enum):
    """Roles recognised by the scheduling engine."""

    ADMIN = "admin"
    CUSTOMER = "customer"


class NotificationStatus(str, Enum):
    """Delivery outcome recorded in the notification log."""

    SENT = "sent"
    FAILED = "failed"
