# backend/studiobook/tasks/reminder_tasks.py
"""
Daily reminder batch as a Celery task.

The HTTP cron endpoint and this task both call ReminderDispatcher; the
notification log keeps them from reminding the same booking twice.
"""

from typing import Any, Dict, Optional

from celery.utils.log import get_task_logger

from ..core.timezone_utils import parse_booking_date
from ..database import get_db_session
from ..services.reminder_dispatcher import ReminderDispatcher
from .beat_schedule import REMINDER_TASK_NAME
from .celery_app import celery_app

logger = get_task_logger(__name__)


@celery_app.task(name=REMINDER_TASK_NAME, max_retries=0, queue="notifications")
def send_daily_reminders(target_date: Optional[str] = None) -> Dict[str, Any]:
    """
    Send reminders for every active booking on ``target_date`` (default tomorrow).

    Returns the run counters.
    """
    with get_db_session() as session:
        day = parse_booking_date(target_date) if target_date else None
        result = ReminderDispatcher(session).run_daily_reminders(day)
        logger.info(
            "Reminders for %s: sent=%s failed=%s skipped=%s",
            result.target_date,
            result.sent,
            result.failed,
            result.skipped,
        )
        return result.to_dict()
