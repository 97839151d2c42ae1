# backend/tests/integration/test_notification_log.py
"""NotificationLogRepository on SQLite: sent rows are unique per (booking, kind)."""

from datetime import time

from studiobook.repositories.notification_log_repository import NotificationLogRepository
from tests.utils.factories import create_booking_row


def test_record_sent_is_idempotent(db, service, stylist, booking_day, customer_user):
    booking = create_booking_row(db, service, stylist, booking_day, time(10, 0), customer_user)
    repo = NotificationLogRepository(db)

    first = repo.record_sent(
        kind="day_before_reminder", recipient=customer_user.email, booking_id=booking.id
    )
    second = repo.record_sent(
        kind="day_before_reminder", recipient=customer_user.email, booking_id=booking.id
    )
    db.commit()

    assert first is True
    assert second is False
    assert repo.get_sent_booking_ids([booking.id], "day_before_reminder") == {booking.id}


def test_failures_do_not_block_a_later_success(
    db, service, stylist, booking_day, customer_user
):
    booking = create_booking_row(db, service, stylist, booking_day, time(10, 0), customer_user)
    repo = NotificationLogRepository(db)

    repo.record_failure(
        kind="day_before_reminder",
        recipient=customer_user.email,
        booking_id=booking.id,
        error_message="timeout",
    )
    repo.record_failure(
        kind="day_before_reminder",
        recipient=customer_user.email,
        booking_id=booking.id,
        error_message="timeout again",
    )
    assert repo.record_sent(
        kind="day_before_reminder", recipient=customer_user.email, booking_id=booking.id
    )
    db.commit()

    logs = repo.list_logs(booking_id=booking.id)
    assert sorted(log.status for log in logs) == ["failed", "failed", "sent"]
    assert [log.delivered for log in logs].count(True) == 1
    assert len(repo.list_logs(status="sent")) == 1


def test_kinds_are_independent(db, service, stylist, booking_day, customer_user):
    booking = create_booking_row(db, service, stylist, booking_day, time(10, 0), customer_user)
    repo = NotificationLogRepository(db)

    assert repo.record_sent(kind="booking_received", recipient="a@b.c", booking_id=booking.id)
    assert repo.record_sent(kind="day_before_reminder", recipient="a@b.c", booking_id=booking.id)
    db.commit()

    assert repo.get_sent_booking_ids([booking.id], "booking_cancellation") == set()
