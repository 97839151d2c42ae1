# backend/studiobook/models/booking.py
"""
Booking model for the studio booking platform.

Bookings are self-contained: they snapshot the service name and duration
so later catalog edits cannot change an existing appointment.

Collision invariant: (staff_id, booking_date, booking_time) is unique among
bookings that are not cancelled. The partial unique index below is the only
authority for admission under concurrent requests; application pre-checks
are advisory.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any, Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Awaiting admin confirmation
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"  # Customer didn't attend

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)

UNIQUE_ACTIVE_SLOT_INDEX = "uq_bookings_staff_slot_active"


class Booking(Base):
    """A customer's appointment with one staff member for one service."""

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    service_id = Column(String(26), ForeignKey("services.id"), nullable=False)
    staff_id = Column(String(26), ForeignKey("staff.id"), nullable=False)
    customer_id = Column(String(64), nullable=False, index=True)

    booking_date = Column(Date, nullable=False, index=True)
    booking_time = Column(Time, nullable=False)

    # Service snapshot (preserved for history)
    service_name = Column(String(120), nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)

    # Denormalized contact details
    customer_name = Column(String(120), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(40), nullable=True)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    # Cancellation tracking
    cancelled_by_id = Column(String(64), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    service = relationship("Service", lazy="joined")
    staff = relationship("Staff", lazy="joined")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed', 'no_show')",
            name="ck_bookings_status",
        ),
        CheckConstraint("duration_minutes > 0", name="check_duration_positive"),
        Index(
            UNIQUE_ACTIVE_SLOT_INDEX,
            "staff_id",
            "booking_date",
            "booking_time",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
        Index("ix_bookings_date_status", "booking_date", "status"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: customer={self.customer_id}, staff={self.staff_id}, "
            f"date={self.booking_date}, time={self.booking_time}, status={self.status}>"
        )

    def confirm(self) -> None:
        self.status = BookingStatus.CONFIRMED.value
        self.confirmed_at = datetime.now(timezone.utc)
        logger.info(f"Booking {self.id} confirmed")

    def cancel(self, cancelled_by_user_id: str, reason: Optional[str] = None) -> None:
        """Cancel this booking."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = datetime.now(timezone.utc)
        self.cancelled_by_id = cancelled_by_user_id
        self.cancellation_reason = reason
        logger.info(f"Booking {self.id} cancelled by user {cancelled_by_user_id}")

    def complete(self) -> None:
        """Mark booking as completed."""
        self.status = BookingStatus.COMPLETED.value
        self.completed_at = datetime.now(timezone.utc)
        logger.info(f"Booking {self.id} marked as completed")

    def mark_no_show(self) -> None:
        """Mark booking as no-show."""
        self.status = BookingStatus.NO_SHOW.value
        logger.info(f"Booking {self.id} marked as no-show")

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def is_owned_by(self, user_id: str) -> bool:
        return self.customer_id == user_id

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses and templates."""
        return {
            "id": self.id,
            "service_id": self.service_id,
            "service_name": self.service_name,
            "staff_id": self.staff_id,
            "staff_name": self.staff.name if self.staff is not None else None,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "booking_date": self.booking_date.isoformat() if self.booking_date else None,
            "booking_time": self.booking_time.strftime("%H:%M") if self.booking_time else None,
            "duration_minutes": self.duration_minutes,
            "status": self.status,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "confirmed_at": self.confirmed_at.isoformat() if self.confirmed_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "cancelled_at": self.cancelled_at.isoformat() if self.cancelled_at else None,
            "cancelled_by_id": self.cancelled_by_id,
            "cancellation_reason": self.cancellation_reason,
        }
