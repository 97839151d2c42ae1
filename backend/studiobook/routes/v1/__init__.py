# backend/studiobook/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import admin, availability, bookings, cron, health

__all__ = [
    "admin",
    "availability",
    "bookings",
    "cron",
    "health",
]
