# backend/tests/unit/test_config.py
"""Settings parsing and validation."""

from datetime import time

from pydantic import ValidationError
import pytest

from studiobook.core.config import Settings


def make_settings(**overrides) -> Settings:
    return Settings(secret_key="unit-test-secret", **overrides)


def test_defaults():
    config = make_settings()
    assert config.slot_interval_minutes == 60
    assert config.open_time == time(9, 0)
    assert config.close_time == time(17, 0)
    assert config.reminder_kind == "day_before"
    assert config.auto_confirm_bookings is False


def test_closed_weekdays_from_comma_string():
    assert make_settings(closed_weekdays="6, 0").closed_weekdays == [0, 6]


def test_closed_weekdays_from_env(monkeypatch):
    monkeypatch.setenv("CLOSED_WEEKDAYS", "5,6")
    assert make_settings().closed_weekdays == [5, 6]


def test_closed_weekdays_empty_string():
    assert make_settings(closed_weekdays="").closed_weekdays == []


def test_closed_weekday_out_of_range():
    with pytest.raises(ValidationError):
        make_settings(closed_weekdays="7")


def test_unknown_timezone_is_rejected():
    with pytest.raises(ValidationError):
        make_settings(business_timezone="Mars/Olympus_Mons")


def test_open_must_precede_close():
    with pytest.raises(ValidationError):
        make_settings(business_open_time="18:00", business_close_time="09:00")


@pytest.mark.parametrize("value", [0, 4, 241])
def test_slot_interval_bounds(value):
    with pytest.raises(ValidationError):
        make_settings(slot_interval_minutes=value)


def test_malformed_clock_is_rejected():
    with pytest.raises(ValidationError):
        make_settings(business_open_time="9am")
