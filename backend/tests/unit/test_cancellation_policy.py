# backend/tests/unit/test_cancellation_policy.py
"""Cancellation checks run ownership, then already-cancelled, then temporal."""

from datetime import date, datetime, time, timedelta

import pytest
import pytz

from studiobook.core.enums import RoleName
from studiobook.core.exceptions import (
    AlreadyCancelledException,
    ForbiddenException,
    PastBookingException,
)
from studiobook.models.booking import Booking
from studiobook.schemas.identity import CurrentUser
from studiobook.services.cancellation_policy import appointment_start, check_cancellation

LAGOS = pytz.timezone("Africa/Lagos")

OWNER = CurrentUser(id="cust-001", email="ada@example.com")
STRANGER = CurrentUser(id="cust-999", email="eve@example.com")
ADMIN = CurrentUser(id="admin-001", email="owner@studio.test", role=RoleName.ADMIN)


def make_booking(status: str = "pending", day: date = date(2030, 3, 4)) -> Booking:
    return Booking(
        id="01HZBOOKING",
        customer_id=OWNER.id,
        status=status,
        booking_date=day,
        booking_time=time(10, 0),
    )


@pytest.fixture
def before_start():
    return LAGOS.localize(datetime(2030, 3, 4, 9, 0))


@pytest.fixture
def after_start():
    return LAGOS.localize(datetime(2030, 3, 4, 10, 30))


def test_appointment_start_is_localized():
    start = appointment_start(make_booking())
    assert start.hour == 10
    assert start.utcoffset() == timedelta(hours=1)


def test_owner_can_cancel_future_booking(before_start):
    check_cancellation(make_booking(), OWNER, before_start)


def test_admin_can_cancel_someone_elses_booking(before_start):
    check_cancellation(make_booking("confirmed"), ADMIN, before_start)


def test_stranger_is_forbidden(before_start):
    with pytest.raises(ForbiddenException):
        check_cancellation(make_booking(), STRANGER, before_start)


def test_forbidden_wins_over_already_cancelled(before_start):
    with pytest.raises(ForbiddenException):
        check_cancellation(make_booking("cancelled"), STRANGER, before_start)


def test_already_cancelled_wins_over_past(after_start):
    with pytest.raises(AlreadyCancelledException) as exc_info:
        check_cancellation(make_booking("cancelled"), OWNER, after_start)
    assert exc_info.value.code == "ALREADY_CANCELLED"


def test_past_booking_is_rejected(after_start):
    with pytest.raises(PastBookingException) as exc_info:
        check_cancellation(make_booking(), OWNER, after_start)
    assert exc_info.value.code == "PAST_BOOKING"


def test_cancel_at_exact_start_is_allowed():
    start = LAGOS.localize(datetime(2030, 3, 4, 10, 0))
    check_cancellation(make_booking(), OWNER, start)
