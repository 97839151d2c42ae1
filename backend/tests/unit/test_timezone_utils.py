# backend/tests/unit/test_timezone_utils.py
from datetime import date, time, timedelta

import pytest

from studiobook.core.exceptions import InvalidDateException, InvalidInputException
from studiobook.core.timezone_utils import (
    business_today,
    business_tomorrow,
    combine_local,
    ensure_not_past,
    parse_booking_date,
    parse_booking_time,
)


class TestParseBookingDate:
    def test_valid(self):
        assert parse_booking_date("2030-03-04") == date(2030, 3, 4)

    @pytest.mark.parametrize("value", ["", "2030-3-4", "04/03/2030", "2030-03-04T10:00", None])
    def test_malformed(self, value):
        with pytest.raises(InvalidInputException) as exc_info:
            parse_booking_date(value)
        assert exc_info.value.code == "INVALID_INPUT"

    def test_impossible_calendar_date(self):
        with pytest.raises(InvalidInputException):
            parse_booking_date("2030-02-30")


class TestParseBookingTime:
    @pytest.mark.parametrize(
        "value,expected",
        [("10:00", time(10, 0)), ("09:30", time(9, 30)), ("16:00:00", time(16, 0))],
    )
    def test_valid(self, value, expected):
        assert parse_booking_time(value) == expected

    @pytest.mark.parametrize("value", ["10", "24:00", "9:00", "10:60", "ten"])
    def test_malformed(self, value):
        with pytest.raises(InvalidInputException):
            parse_booking_time(value)


def test_today_and_tomorrow():
    assert business_tomorrow() - business_today() == timedelta(days=1)


def test_ensure_not_past():
    ensure_not_past(business_today())
    with pytest.raises(InvalidDateException) as exc_info:
        ensure_not_past(business_today() - timedelta(days=1))
    assert exc_info.value.code == "INVALID_DATE"


def test_combine_local_is_aware():
    moment = combine_local(date(2030, 3, 4), time(10, 0))
    assert moment.tzinfo is not None
    assert moment.utcoffset() == timedelta(hours=1)
