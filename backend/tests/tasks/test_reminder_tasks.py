# backend/tests/tasks/test_reminder_tasks.py
"""Celery wiring for the daily reminder batch."""

from datetime import time
from unittest.mock import patch

import pytest

from studiobook.core.config import settings
from studiobook.core.timezone_utils import business_tomorrow
from studiobook.database import get_db_session
from studiobook.models.service import Service
from studiobook.tasks.beat_schedule import REMINDER_TASK_NAME, get_beat_schedule
from studiobook.tasks.celery_app import celery_app
from studiobook.tasks.reminder_tasks import send_daily_reminders
from tests.utils.factories import create_booking_row


def test_task_is_registered():
    assert REMINDER_TASK_NAME in celery_app.tasks


def test_beat_runs_daily_at_configured_time():
    entry = get_beat_schedule()["send-daily-booking-reminders"]

    assert entry["task"] == REMINDER_TASK_NAME
    assert entry["schedule"].hour == {settings.reminder_schedule_hour}
    assert entry["schedule"].minute == {settings.reminder_schedule_minute}
    assert entry["options"]["queue"] == "notifications"


def test_task_runs_dispatcher(session_factory, db, service, stylist, customer_user):
    create_booking_row(db, service, stylist, business_tomorrow(), time(11, 0), customer_user)

    with patch("studiobook.database.SessionLocal", session_factory):
        first = send_daily_reminders()
        second = send_daily_reminders(business_tomorrow().isoformat())

    assert first["target_date"] == business_tomorrow().isoformat()
    assert (first["total"], first["sent"]) == (1, 1)
    assert (second["sent"], second["skipped"]) == (0, 1)


def test_task_session_scope_rolls_back_on_error(session_factory, db):
    with patch("studiobook.database.SessionLocal", session_factory):
        with pytest.raises(RuntimeError):
            with get_db_session() as session:
                session.add(Service(name="Silk Press", duration_minutes=90, price=20000))
                session.flush()
                raise RuntimeError("worker crashed")

    assert db.query(Service).filter(Service.name == "Silk Press").count() == 0
