# backend/tests/utils/factories.py
"""Builders for catalog rows, bookings and tokens used across the suite."""

from datetime import date, time
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from studiobook.auth import create_access_token
from studiobook.models.booking import Booking, BookingStatus
from studiobook.models.service import Service
from studiobook.models.staff import Staff, StaffWorkingHours
from studiobook.schemas.identity import CurrentUser


def create_service(
    db: Session, name: str = "Box Braids", duration_minutes: int = 60, is_active: bool = True
) -> Service:
    service = Service(
        name=name, duration_minutes=duration_minutes, price=15000, is_active=is_active
    )
    db.add(service)
    db.commit()
    return service


def create_staff(
    db: Session,
    name: str,
    services: Sequence[Service] = (),
    working_hours: Sequence[Tuple[int, time, time]] = (),
    is_active: bool = True,
) -> Staff:
    staff = Staff(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@studio.test",
        is_active=is_active,
    )
    staff.services = list(services)
    staff.working_hours = [
        StaffWorkingHours(weekday=weekday, start_time=start, end_time=end)
        for weekday, start, end in working_hours
    ]
    db.add(staff)
    db.commit()
    return staff


def create_booking_row(
    db: Session,
    service: Service,
    staff: Staff,
    booking_date: date,
    booking_time: time,
    customer: CurrentUser,
    status: str = BookingStatus.PENDING.value,
    duration_minutes: Optional[int] = None,
) -> Booking:
    """Insert a booking directly, bypassing the service's date checks."""
    booking = Booking(
        service_id=service.id,
        staff_id=staff.id,
        customer_id=customer.id,
        booking_date=booking_date,
        booking_time=booking_time,
        service_name=service.name,
        duration_minutes=duration_minutes or service.duration_minutes,
        status=status,
        customer_name=customer.display_name,
        customer_email=customer.email,
    )
    db.add(booking)
    db.commit()
    return booking


def auth_headers_for(user: CurrentUser) -> Dict[str, str]:
    token = create_access_token(
        {"sub": user.id, "email": user.email, "role": user.role.value, "name": user.name}
    )
    return {"Authorization": f"Bearer {token}"}


def slot_map(payload: dict) -> Dict[str, bool]:
    return {slot["time"]: slot["available"] for slot in payload["slots"]}


def available_times(payload: dict) -> List[str]:
    return [slot["time"] for slot in payload["slots"] if slot["available"]]
