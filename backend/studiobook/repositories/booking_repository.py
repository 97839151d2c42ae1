# backend/studiobook/repositories/booking_repository.py
"""
Booking Repository for the studio booking platform.

Read paths for slot computation, customer history, admin listing and the
reminder batch. Inserts go through BaseRepository.create and status changes
through the compare-and-set ``claim_status``, both inside a
service-owned transaction.
"""

from datetime import date
import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_QUERY_LIMIT
from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def get_occupying_bookings(
        self, booking_date: date, staff_ids: Optional[Iterable[str]] = None
    ) -> List[Booking]:
        """
        Non-cancelled bookings on a date, optionally restricted to some staff.

        These are the bookings that occupy grid slots.
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.booking_date == booking_date,
                Booking.status != BookingStatus.CANCELLED.value,
            )
            if staff_ids is not None:
                ids = list(staff_ids)
                if not ids:
                    return []
                query = query.filter(Booking.staff_id.in_(ids))
            return query.order_by(Booking.booking_time, Booking.staff_id).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading bookings for {booking_date}: {str(e)}")
            raise RepositoryException(f"Failed to load bookings: {str(e)}")

    def get_bookings_for_date(
        self, booking_date: date, statuses: Sequence[str]
    ) -> List[Booking]:
        """Bookings on a date in any of the given statuses, in appointment order."""
        try:
            return (
                self.db.query(Booking)
                .filter(Booking.booking_date == booking_date, Booking.status.in_(list(statuses)))
                .order_by(Booking.booking_time, Booking.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading bookings for {booking_date}: {str(e)}")
            raise RepositoryException(f"Failed to load bookings for date: {str(e)}")

    def get_customer_bookings(self, customer_id: str, limit: int = DEFAULT_QUERY_LIMIT) -> List[Booking]:
        """A customer's bookings, newest appointment first."""
        try:
            return (
                self.db.query(Booking)
                .filter(Booking.customer_id == customer_id)
                .order_by(Booking.booking_date.desc(), Booking.booking_time.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading bookings for customer {customer_id}: {str(e)}")
            raise RepositoryException(f"Failed to load customer bookings: {str(e)}")

    def list_bookings(
        self,
        *,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        service_id: Optional[str] = None,
        staff_id: Optional[str] = None,
        skip: int = 0,
        limit: int = DEFAULT_QUERY_LIMIT,
    ) -> List[Booking]:
        """Admin listing with optional filters, newest appointment first."""
        try:
            query = self.db.query(Booking)
            if status:
                query = query.filter(Booking.status == status)
            if start_date:
                query = query.filter(Booking.booking_date >= start_date)
            if end_date:
                query = query.filter(Booking.booking_date <= end_date)
            if service_id:
                query = query.filter(Booking.service_id == service_id)
            if staff_id:
                query = query.filter(Booking.staff_id == staff_id)
            return (
                query.order_by(Booking.booking_date.desc(), Booking.booking_time.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def claim_status(self, booking_id: str, expected_status: str, next_status: str) -> bool:
        """
        Move a booking to ``next_status`` only if it is still in ``expected_status``.

        Returns False when another writer changed the status first. Does NOT
        commit; the row stays locked until the caller's transaction ends.
        """
        try:
            result = self.db.execute(
                update(Booking)
                .where(Booking.id == booking_id, Booking.status == expected_status)
                .values(status=next_status)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1
        except SQLAlchemyError as e:
            self.logger.error(f"Error updating status of booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to update booking status: {str(e)}")
