"""
Timezone utilities for the studio booking platform.

The studio operates in a single business timezone; every "today" and
"now" used for scheduling decisions is taken in that zone.
"""

from datetime import date, datetime, time, timedelta
import re

import pytz

from .config import settings
from .constants import DATE_PATTERN, TIME_PATTERN
from .exceptions import InvalidDateException, InvalidInputException

_DATE_RE = re.compile(DATE_PATTERN)
_TIME_RE = re.compile(TIME_PATTERN)


def get_business_timezone() -> pytz.BaseTzInfo:
    return pytz.timezone(settings.business_timezone)


def business_now() -> datetime:
    """Current aware datetime in the business timezone."""
    return datetime.now(get_business_timezone())


def business_today() -> date:
    """Today's date in the business timezone."""
    return business_now().date()


def business_tomorrow() -> date:
    return business_today() + timedelta(days=1)


def combine_local(day: date, clock: time) -> datetime:
    """
    Build an aware datetime for a wall-clock time at the studio.

    Uses ``localize`` so DST offsets are applied correctly.
    """
    return get_business_timezone().localize(datetime.combine(day, clock))


def parse_booking_date(value: str) -> date:
    """
    Parse a strict YYYY-MM-DD string.

    Raises:
        InvalidInputException: on malformed input or impossible calendar dates
    """
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise InvalidInputException(
            "Invalid date format. Use YYYY-MM-DD", details={"field": "date", "value": value}
        )
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidInputException(
            "Invalid calendar date", details={"field": "date", "value": value}
        ) from exc


def parse_booking_time(value: str) -> time:
    """Parse HH:MM (24h), tolerating a trailing :SS."""
    if not isinstance(value, str) or not _TIME_RE.match(value.strip()):
        raise InvalidInputException(
            "Invalid time format. Use HH:MM", details={"field": "time", "value": value}
        )
    parts = [int(p) for p in value.strip().split(":")]
    return time(*parts)


def ensure_not_past(day: date) -> None:
    """Reject dates earlier than today in the business calendar."""
    if day < business_today():
        raise InvalidDateException(
            "Cannot use a date in the past",
            details={"date": day.isoformat(), "today": business_today().isoformat()},
        )
