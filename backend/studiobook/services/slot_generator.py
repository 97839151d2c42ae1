# backend/studiobook/services/slot_generator.py
"""
Slot Generator for the studio booking platform.

Slots are derived on every query from business hours, service duration and
the bookings currently occupying each capable staff member. Nothing is
stored, so results cannot go stale; they can still lose a race with a
concurrent booking, which the ledger reports as SLOT_UNAVAILABLE.

Occupancy uses interval overlap: a staff member is busy at a candidate
start when any non-cancelled booking overlaps [start, start + duration),
using each booking's own snapshotted duration.
"""

from dataclasses import dataclass, field
from datetime import date, time
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.timezone_utils import (
    business_now,
    combine_local,
    ensure_not_past,
    parse_booking_date,
)
from ..models.booking import Booking
from ..models.service import Service
from ..models.staff import Staff
from ..repositories.booking_repository import BookingRepository
from ..repositories.catalog_repository import CatalogRepository
from .base import BaseService

logger = logging.getLogger(__name__)

Interval = Tuple[int, int]


@dataclass(frozen=True)
class TimeSlot:
    time: time
    available: bool

    def to_dict(self) -> Dict[str, object]:
        return {"time": self.time.strftime("%H:%M"), "available": self.available}


@dataclass
class SlotsResult:
    date: date
    slots: List[TimeSlot] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of bookable slots."""
        return sum(1 for slot in self.slots if slot.available)


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def from_minutes(value: int) -> time:
    return time(value // 60, value % 60)


def build_grid(open_time: time, close_time: time, step: int, duration: int) -> List[time]:
    """Candidate starts from opening, stepped by ``step``, that finish by closing."""
    starts: List[time] = []
    cursor = to_minutes(open_time)
    close = to_minutes(close_time)
    while cursor + duration <= close:
        starts.append(from_minutes(cursor))
        cursor += step
    return starts


def overlaps(a: Interval, b: Interval) -> bool:
    return a[0] < b[1] and b[0] < a[1]


def busy_intervals_by_staff(bookings: Iterable[Booking]) -> Dict[str, List[Interval]]:
    busy: Dict[str, List[Interval]] = {}
    for booking in bookings:
        start = to_minutes(booking.booking_time)
        busy.setdefault(booking.staff_id, []).append((start, start + booking.duration_minutes))
    return busy


def working_windows(staff: Staff, weekday: int) -> Optional[List[Interval]]:
    """
    Windows for ``weekday``; None when the staff member has no weekly schedule.

    An empty list means the staff member has a schedule but is off that day.
    """
    if not staff.working_hours:
        return None
    return [
        (to_minutes(window.start_time), to_minutes(window.end_time))
        for window in staff.working_hours
        if window.weekday == weekday
    ]


def is_on_duty(staff: Staff, weekday: int) -> bool:
    windows = working_windows(staff, weekday)
    return windows is None or bool(windows)


def is_staff_free(
    staff: Staff,
    weekday: int,
    candidate: Interval,
    busy: Sequence[Interval],
) -> bool:
    """Whether ``staff`` can take an appointment spanning ``candidate``."""
    windows = working_windows(staff, weekday)
    if windows is not None and not any(
        window[0] <= candidate[0] and candidate[1] <= window[1] for window in windows
    ):
        return False
    return not any(overlaps(candidate, interval) for interval in busy)


class SlotGenerator(BaseService):
    """Computes bookable slots for a date and optional service."""

    def __init__(
        self,
        db: Session,
        booking_repository: Optional[BookingRepository] = None,
        catalog_repository: Optional[CatalogRepository] = None,
    ):
        super().__init__(db)
        self.booking_repository = booking_repository or BookingRepository(db)
        self.catalog_repository = catalog_repository or CatalogRepository(db)

    def slot_duration(self, service: Optional[Service]) -> int:
        return service.duration_minutes if service is not None else settings.slot_interval_minutes

    def candidate_times(self, duration: int) -> List[time]:
        return build_grid(
            settings.open_time, settings.close_time, settings.slot_interval_minutes, duration
        )

    def is_on_grid(self, start: time, duration: int) -> bool:
        return start.second == 0 and start in self.candidate_times(duration)

    @BaseService.measure_operation("compute_slots")
    def compute_slots(self, date_value: str, service_id: Optional[str] = None) -> SlotsResult:
        """
        Compute the ordered slot sequence for a date.

        Raises:
            InvalidInputException: malformed date
            InvalidDateException: date before today in the business timezone
        """
        booking_date = parse_booking_date(date_value)
        ensure_not_past(booking_date)
        result = SlotsResult(date=booking_date)

        service: Optional[Service] = None
        if service_id:
            service = self.catalog_repository.get_active_service(service_id)
            if service is None:
                self.logger.info(f"Slots requested for unknown or inactive service {service_id}")
                return result

        weekday = booking_date.weekday()
        if weekday in settings.closed_weekdays:
            return result

        staff_members = [
            member
            for member in self.catalog_repository.get_capable_staff(service_id if service else None)
            if is_on_duty(member, weekday)
        ]
        if not staff_members:
            return result

        duration = self.slot_duration(service)
        bookings = self.booking_repository.get_occupying_bookings(
            booking_date, [member.id for member in staff_members]
        )
        busy = busy_intervals_by_staff(bookings)

        now = business_now()
        for start in self.candidate_times(duration):
            if combine_local(booking_date, start) <= now:
                continue
            candidate = (to_minutes(start), to_minutes(start) + duration)
            available = any(
                is_staff_free(member, weekday, candidate, busy.get(member.id, []))
                for member in staff_members
            )
            result.slots.append(TimeSlot(time=start, available=available))

        self.log_operation(
            "compute_slots",
            date=booking_date.isoformat(),
            service_id=service_id,
            available=result.count,
        )
        return result

    def find_free_staff(
        self,
        booking_date: date,
        start: time,
        service: Service,
        exclude: Iterable[str] = (),
    ) -> List[Staff]:
        """
        Capable staff free for ``service`` at ``start``, in assignment order.

        Uses the same occupancy rules as ``compute_slots``.
        """
        weekday = booking_date.weekday()
        if weekday in settings.closed_weekdays:
            return []
        excluded = set(exclude)
        staff_members = [
            member
            for member in self.catalog_repository.get_capable_staff(service.id)
            if member.id not in excluded
        ]
        if not staff_members:
            return []
        busy = busy_intervals_by_staff(
            self.booking_repository.get_occupying_bookings(
                booking_date, [member.id for member in staff_members]
            )
        )
        candidate = (to_minutes(start), to_minutes(start) + service.duration_minutes)
        return [
            member
            for member in staff_members
            if is_staff_free(member, weekday, candidate, busy.get(member.id, []))
        ]

    def is_staff_available(
        self, staff: Staff, booking_date: date, start: time, duration: int
    ) -> bool:
        if booking_date.weekday() in settings.closed_weekdays:
            return False
        busy = busy_intervals_by_staff(
            self.booking_repository.get_occupying_bookings(booking_date, [staff.id])
        )
        candidate = (to_minutes(start), to_minutes(start) + duration)
        return is_staff_free(staff, booking_date.weekday(), candidate, busy.get(staff.id, []))
