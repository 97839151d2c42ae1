# backend/tests/unit/test_reminder_dispatcher.py
"""Unit tests for the reminder batch with mocked collaborators."""

from datetime import date
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from sqlalchemy.orm import Session

from studiobook.core.exceptions import RepositoryException, StorageException
from studiobook.services.notification_service import DeliveryOutcome
from studiobook.services.reminder_dispatcher import ReminderDispatcher, reminder_log_kind

TARGET = date(2030, 3, 5)


class TestReminderDispatcher:
    @pytest.fixture
    def notification_service(self):
        mock = Mock()
        mock.send_booking_reminder.return_value = DeliveryOutcome.SENT
        return mock

    @pytest.fixture
    def booking_repository(self):
        repo = Mock()
        repo.get_bookings_for_date.return_value = [
            SimpleNamespace(id="b1"),
            SimpleNamespace(id="b2"),
            SimpleNamespace(id="b3"),
        ]
        return repo

    @pytest.fixture
    def log_repository(self):
        repo = Mock()
        repo.get_sent_booking_ids.return_value = set()
        return repo

    @pytest.fixture
    def dispatcher(self, notification_service, booking_repository, log_repository):
        return ReminderDispatcher(
            Mock(spec=Session),
            notification_service=notification_service,
            booking_repository=booking_repository,
            log_repository=log_repository,
        )

    def test_kind_is_derived_from_settings(self):
        assert reminder_log_kind() == "day_before_reminder"

    def test_all_sent(self, dispatcher, notification_service, booking_repository):
        result = dispatcher.run_daily_reminders(TARGET)

        assert (result.total, result.sent, result.failed, result.skipped) == (3, 3, 0, 0)
        booking_repository.get_bookings_for_date.assert_called_once_with(
            TARGET, ("pending", "confirmed")
        )
        assert notification_service.send_booking_reminder.call_count == 3

    def test_already_reminded_bookings_are_skipped(
        self, dispatcher, notification_service, log_repository
    ):
        log_repository.get_sent_booking_ids.return_value = {"b1", "b3"}

        result = dispatcher.run_daily_reminders(TARGET)

        assert (result.sent, result.skipped) == (1, 2)
        sent_ids = [call.args[0].id for call in notification_service.send_booking_reminder.call_args_list]
        assert sent_ids == ["b2"]

    def test_one_failure_does_not_stop_the_batch(self, dispatcher, notification_service):
        notification_service.send_booking_reminder.side_effect = [
            DeliveryOutcome.SENT,
            DeliveryOutcome.FAILED,
            DeliveryOutcome.SENT,
        ]

        result = dispatcher.run_daily_reminders(TARGET)

        assert (result.total, result.sent, result.failed) == (3, 2, 1)

    def test_unexpected_error_counts_as_failure(self, dispatcher, notification_service):
        notification_service.send_booking_reminder.side_effect = [
            RuntimeError("transport exploded"),
            DeliveryOutcome.SENT,
            DeliveryOutcome.SENT,
        ]

        result = dispatcher.run_daily_reminders(TARGET)

        assert (result.sent, result.failed) == (2, 1)

    def test_concurrent_duplicate_counts_as_skipped(self, dispatcher, notification_service):
        notification_service.send_booking_reminder.side_effect = [
            DeliveryOutcome.SENT,
            DeliveryOutcome.DUPLICATE,
            DeliveryOutcome.SENT,
        ]

        result = dispatcher.run_daily_reminders(TARGET)

        assert (result.sent, result.skipped, result.failed) == (2, 1, 0)

    def test_empty_day(self, dispatcher, booking_repository):
        booking_repository.get_bookings_for_date.return_value = []

        result = dispatcher.run_daily_reminders(TARGET)

        assert result.to_dict() == {
            "target_date": "2030-03-05",
            "total": 0,
            "sent": 0,
            "failed": 0,
            "skipped": 0,
        }

    def test_ledger_failure_is_a_storage_error(self, dispatcher, booking_repository):
        booking_repository.get_bookings_for_date.side_effect = RepositoryException("db down")

        with pytest.raises(StorageException):
            dispatcher.run_daily_reminders(TARGET)
