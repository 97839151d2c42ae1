"""Application-wide constants for the studio booking platform."""

from __future__ import annotations

BRAND_NAME = "Modern Beauty Studio"
BRAND_LOCATION = "Asaba, Nigeria"

# Wire formats accepted for booking dates and times
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)(:([0-5]\d))?$"

# Grid granularity bounds (minutes)
MIN_SLOT_INTERVAL = 5
MAX_SLOT_INTERVAL = 240

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 500

# Notification kinds recorded in the notification log
NOTIFICATION_BOOKING_RECEIVED = "booking_received"
NOTIFICATION_BOOKING_CONFIRMATION = "booking_confirmation"
NOTIFICATION_BOOKING_CANCELLATION = "booking_cancellation"
NOTIFICATION_BOOKING_REMINDER = "booking_reminder"


MAX_REASON_LENGTH = 255

# API metadata
API_TITLE = f"{BRAND_NAME} Booking API"
API_DESCRIPTION = "Slot availability, booking ledger and reminders for the studio."
ALLOWED_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
