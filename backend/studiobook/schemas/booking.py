# backend/studiobook/schemas/booking.py
"""
Booking schemas.

Dates and times arrive as strings and are parsed by the service layer so
that format problems map onto the scheduling error codes.
"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..core.constants import MAX_REASON_LENGTH
from ..models.booking import Booking


class BookingCreate(BaseModel):
    """Customer request to book a service at a grid time."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    service_id: str = Field(..., validation_alias=AliasChoices("service_id", "serviceId"))
    staff_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("staff_id", "staffId"),
        description="Omit to let the studio assign any free capable staff member",
    )
    booking_date: str = Field(
        ...,
        validation_alias=AliasChoices("booking_date", "bookingDate", "date"),
        examples=["2025-06-02"],
    )
    booking_time: str = Field(
        ...,
        validation_alias=AliasChoices("booking_time", "bookingTime", "time"),
        examples=["10:00"],
    )
    notes: Optional[str] = Field(default=None, max_length=1000)
    customer_name: Optional[str] = Field(
        default=None,
        max_length=120,
        validation_alias=AliasChoices("customer_name", "customerName"),
    )
    customer_phone: Optional[str] = Field(
        default=None,
        max_length=40,
        validation_alias=AliasChoices("customer_phone", "customerPhone"),
    )


class BookingCancel(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=MAX_REASON_LENGTH)


class BookingStatusUpdate(BaseModel):
    """Admin status change."""

    status: Literal["confirmed", "cancelled", "completed", "no_show"]
    reason: Optional[str] = Field(default=None, max_length=MAX_REASON_LENGTH)


class BookingResponse(BaseModel):
    id: str
    service_id: str
    service_name: str
    staff_id: str
    staff_name: Optional[str] = None
    customer_id: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    booking_date: date
    booking_time: str
    duration_minutes: int
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by_id: Optional[str] = None
    cancellation_reason: Optional[str] = None

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            service_id=booking.service_id,
            service_name=booking.service_name,
            staff_id=booking.staff_id,
            staff_name=booking.staff.name if booking.staff is not None else None,
            customer_id=booking.customer_id,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            customer_phone=booking.customer_phone,
            booking_date=booking.booking_date,
            booking_time=booking.booking_time.strftime("%H:%M"),
            duration_minutes=booking.duration_minutes,
            status=booking.status,
            notes=booking.notes,
            created_at=booking.created_at,
            confirmed_at=booking.confirmed_at,
            completed_at=booking.completed_at,
            cancelled_at=booking.cancelled_at,
            cancelled_by_id=booking.cancelled_by_id,
            cancellation_reason=booking.cancellation_reason,
        )


class BookingCancelResponse(BaseModel):
    success: bool = True
    message: str = "Booking cancelled successfully"
    booking: BookingResponse


class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    count: int

    @classmethod
    def from_bookings(cls, bookings: List[Booking]) -> "BookingListResponse":
        items = [BookingResponse.from_booking(booking) for booking in bookings]
        return cls(bookings=items, count=len(items))
