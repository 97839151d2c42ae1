# backend/studiobook/tasks/beat_schedule.py
"""
Celery Beat schedule.

The reminder batch runs once a day at REMINDER_SCHEDULE_HOUR:REMINDER_SCHEDULE_MINUTE
in the business timezone and targets the next calendar day.
"""

from typing import Any, Dict

from celery.schedules import crontab

from ..core.config import settings

REMINDER_TASK_NAME = "reminders.send_daily"


def get_beat_schedule() -> Dict[str, Dict[str, Any]]:
    return {
        "send-daily-booking-reminders": {
            "task": REMINDER_TASK_NAME,
            "schedule": crontab(
                hour=settings.reminder_schedule_hour,
                minute=settings.reminder_schedule_minute,
            ),
            "options": {
                "queue": "notifications",
                # Expire before the next day's run so a backlog never double-fires.
                "expires": 60 * 60 * 12,
            },
        },
    }
