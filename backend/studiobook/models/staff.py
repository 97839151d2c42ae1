# backend/studiobook/models/staff.py
"""
Staff roster models.

A staff member's capability set is the ``staff_services`` association.
Weekly working hours are optional: a staff member with no rows works the
studio's business hours; one with rows works only inside those windows.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Time,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

staff_services = Table(
    "staff_services",
    Base.metadata,
    Column("staff_id", String(26), ForeignKey("staff.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "service_id", String(26), ForeignKey("services.id", ondelete="CASCADE"), primary_key=True
    ),
)


class Staff(Base):
    """A stylist or technician who performs services."""

    __tablename__ = "staff"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    services = relationship("Service", secondary=staff_services, back_populates="staff")
    working_hours = relationship(
        "StaffWorkingHours",
        back_populates="staff",
        cascade="all, delete-orphan",
        order_by="StaffWorkingHours.start_time",
    )

    def can_perform(self, service_id: str) -> bool:
        return any(service.id == service_id for service in self.services)

    def __repr__(self) -> str:
        return f"<Staff {self.id}: {self.name} active={self.is_active}>"


class StaffWorkingHours(Base):
    """One weekly working window for a staff member (weekday 0=Monday)."""

    __tablename__ = "staff_working_hours"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    staff_id = Column(
        String(26), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True
    )
    weekday = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    staff = relationship("Staff", back_populates="working_hours")

    __table_args__ = (
        CheckConstraint("weekday >= 0 AND weekday <= 6", name="check_weekday_range"),
        CheckConstraint("start_time < end_time", name="check_working_hours_order"),
    )

    def __repr__(self) -> str:
        return (
            f"<StaffWorkingHours staff={self.staff_id} weekday={self.weekday} "
            f"{self.start_time}-{self.end_time}>"
        )
