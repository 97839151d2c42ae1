# backend/studiobook/services/booking_service.py
"""
Booking Service (the booking ledger) for the studio booking platform.

Handles all booking-related business logic including:
- Creating bookings with storage-enforced conflict prevention
- Customer and admin cancellation
- Admin status transitions
- Booking queries

Admission is decided by the partial unique index on
(staff_id, booking_date, booking_time) among non-cancelled bookings. The
availability pre-check only produces a friendlier early rejection; an
IntegrityError from the insert is always translated into
SlotUnavailableException. Status changes are compare-and-set writes on
the stored status, so two interleaved requests cannot both succeed.
"""

from datetime import date, time
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import RoleName
from ..core.exceptions import (
    ForbiddenException,
    InvalidDateException,
    InvalidInputException,
    InvalidTransitionException,
    NotFoundException,
    RepositoryException,
    SlotUnavailableException,
    StorageException,
)
from ..core.timezone_utils import (
    business_now,
    combine_local,
    ensure_not_past,
    parse_booking_date,
    parse_booking_time,
)
from ..models.booking import UNIQUE_ACTIVE_SLOT_INDEX, Booking, BookingStatus
from ..models.service import Service
from ..models.staff import Staff
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.booking_repository import BookingRepository
from ..repositories.catalog_repository import CatalogRepository
from ..schemas.booking import BookingCreate
from ..schemas.identity import CurrentUser
from .base import BaseService
from .booking_lifecycle import (
    BookingAction,
    action_for_target,
    apply_transition,
    resolve_transition,
)
from .cancellation_policy import appointment_start, check_cancellation
from .notification_service import NotificationService
from .slot_generator import SlotGenerator

logger = logging.getLogger(__name__)

# Reload-and-recheck rounds when a concurrent request changes the status first
STATUS_WRITE_ATTEMPTS = 3


def _role_of(user: CurrentUser) -> RoleName:
    return RoleName.ADMIN if user.is_admin else RoleName.CUSTOMER


class BookingService(BaseService):
    """Service layer for booking operations."""

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        repository: Optional[BookingRepository] = None,
        catalog_repository: Optional[CatalogRepository] = None,
        slot_generator: Optional[SlotGenerator] = None,
    ):
        super().__init__(db)
        self.notification_service = notification_service or NotificationService(db)
        self.repository = repository or BookingRepository(db)
        self.catalog_repository = catalog_repository or CatalogRepository(db)
        self.slot_generator = slot_generator or SlotGenerator(
            db, self.repository, self.catalog_repository
        )

    @BaseService.measure_operation("create_booking")
    def create_booking(self, customer: CurrentUser, booking_data: BookingCreate) -> Booking:
        """
        Create a booking for ``customer``.

        Returns:
            The persisted booking, ``pending`` unless auto-confirmation is enabled

        Raises:
            NotFoundException: service or requested staff member not found
            InvalidDateException: malformed or past date/time
            InvalidInputException: malformed time, off-grid time, ineligible staff
            SlotUnavailableException: the slot is already taken
            StorageException: unexpected persistence failure
        """
        self.log_operation(
            "create_booking",
            customer_id=customer.id,
            service_id=booking_data.service_id,
            date=booking_data.booking_date,
            time=booking_data.booking_time,
        )

        service = self.catalog_repository.get_active_service(booking_data.service_id)
        if service is None:
            raise NotFoundException(
                "Service not found or no longer available",
                details={"service_id": booking_data.service_id},
            )

        booking_date, booking_time = self._validate_when(booking_data, service)

        if booking_data.staff_id:
            staff = self._validate_requested_staff(booking_data.staff_id, service)
            if not self.slot_generator.is_staff_available(
                staff, booking_date, booking_time, service.duration_minutes
            ):
                prometheus_metrics.inc_booking_conflict("precheck")
                raise SlotUnavailableException(details=self._conflict_details(booking_data))
            candidates = [staff]
        else:
            candidates = self.slot_generator.find_free_staff(booking_date, booking_time, service)
            if not candidates:
                prometheus_metrics.inc_booking_conflict("precheck")
                raise SlotUnavailableException(details=self._conflict_details(booking_data))

        booking = self._insert_with_fallback(
            customer, booking_data, service, booking_date, booking_time, candidates
        )

        self._notify(self.notification_service.notify_booking_received, booking)
        return booking

    def _validate_when(
        self, booking_data: BookingCreate, service: Service
    ) -> Tuple[date, time]:
        try:
            booking_date = parse_booking_date(booking_data.booking_date)
        except InvalidInputException as e:
            raise InvalidDateException(e.message, details=e.details) from e
        ensure_not_past(booking_date)

        booking_time = parse_booking_time(booking_data.booking_time)
        if combine_local(booking_date, booking_time) <= business_now():
            raise InvalidDateException(
                "Cannot book a time in the past",
                details={"date": booking_date.isoformat(), "time": booking_data.booking_time},
            )
        if booking_date.weekday() in settings.closed_weekdays:
            raise InvalidInputException(
                "The studio is closed on this day", details={"date": booking_date.isoformat()}
            )
        if not self.slot_generator.is_on_grid(booking_time, service.duration_minutes):
            raise InvalidInputException(
                "Time must be one of the offered slot times within business hours",
                details={
                    "time": booking_data.booking_time,
                    "open": settings.business_open_time,
                    "close": settings.business_close_time,
                    "interval_minutes": settings.slot_interval_minutes,
                },
            )
        return booking_date, booking_time

    def _validate_requested_staff(self, staff_id: str, service: Service) -> Staff:
        staff = self.catalog_repository.get_staff(staff_id)
        if staff is None:
            raise NotFoundException("Staff member not found", details={"staff_id": staff_id})
        if not staff.is_active:
            raise InvalidInputException(
                "Staff member is not currently taking bookings", details={"staff_id": staff_id}
            )
        if not staff.can_perform(service.id):
            raise InvalidInputException(
                "Staff member does not perform this service",
                details={"staff_id": staff_id, "service_id": service.id},
            )
        return staff

    def _insert_with_fallback(
        self,
        customer: CurrentUser,
        booking_data: BookingCreate,
        service: Service,
        booking_date: date,
        booking_time: time,
        candidates: List[Staff],
    ) -> Booking:
        """
        Try each candidate staff member until the insert is admitted.

        Only auto-assigned bookings have more than one candidate.
        """
        initial_status = (
            BookingStatus.CONFIRMED if settings.auto_confirm_bookings else BookingStatus.PENDING
        )
        last_error: Optional[IntegrityError] = None
        for staff in candidates:
            try:
                with self.repository.transaction():
                    booking = self.repository.create(
                        service_id=service.id,
                        staff_id=staff.id,
                        customer_id=customer.id,
                        booking_date=booking_date,
                        booking_time=booking_time,
                        service_name=service.name,
                        duration_minutes=service.duration_minutes,
                        status=initial_status.value,
                        customer_name=booking_data.customer_name or customer.display_name,
                        customer_email=customer.email,
                        customer_phone=booking_data.customer_phone,
                        notes=booking_data.notes,
                    )
                    if initial_status is BookingStatus.CONFIRMED:
                        booking.confirm()
            except IntegrityError as exc:
                if not self._is_slot_conflict(exc):
                    raise StorageException(f"Database operation failed: {exc.orig}") from exc
                prometheus_metrics.inc_booking_conflict("constraint")
                self.logger.info(
                    f"Slot {booking_date} {booking_time} taken for staff {staff.id}; "
                    f"{len(candidates) - candidates.index(staff) - 1} candidates left"
                )
                last_error = exc
                continue
            except (RepositoryException, SQLAlchemyError) as exc:
                raise StorageException(f"Database operation failed: {str(exc)}") from exc

            self.log_operation("booking_created", booking_id=booking.id, staff_id=staff.id)
            return booking

        raise SlotUnavailableException(details=self._conflict_details(booking_data)) from last_error

    def _is_slot_conflict(self, integrity_error: IntegrityError) -> bool:
        """
        Whether an IntegrityError came from the active-slot uniqueness index.

        PostgreSQL names the index; SQLite only names the columns.
        """
        orig = getattr(integrity_error, "orig", None)
        diag = getattr(orig, "diag", None)
        constraint_name = getattr(diag, "constraint_name", None) if diag is not None else None
        if constraint_name:
            return constraint_name == UNIQUE_ACTIVE_SLOT_INDEX
        text = str(orig if orig is not None else integrity_error).lower()
        return UNIQUE_ACTIVE_SLOT_INDEX in text or (
            "unique" in text and "bookings.staff_id" in text and "bookings.booking_time" in text
        )

    def _conflict_details(self, booking_data: BookingCreate) -> Dict[str, Any]:
        return {
            "service_id": booking_data.service_id,
            "staff_id": booking_data.staff_id,
            "booking_date": booking_data.booking_date,
            "booking_time": booking_data.booking_time,
        }

    def _notify(self, sender: Callable[[Booking], bool], booking: Booking) -> None:
        """Best-effort notification; a failure never affects the booking."""
        try:
            if not sender(booking):
                self.logger.warning(f"Notification for booking {booking.id} was not delivered")
        except Exception as e:
            self.logger.error(f"Notification for booking {booking.id} failed: {str(e)}")

    def _get_booking_or_404(self, booking_id: str) -> Booking:
        try:
            booking = self.repository.get_by_id(booking_id)
        except RepositoryException as e:
            raise StorageException(str(e)) from e
        if booking is None:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        return booking

    def _commit_transition(
        self,
        booking: Booking,
        decide: Callable[[Booking], BookingStatus],
        actor_id: str,
        role: RoleName,
        reason: Optional[str] = None,
    ) -> BookingStatus:
        """
        Write the status chosen by ``decide`` only if the stored status is unchanged.

        When another request changed the booking first, the row is reloaded and
        ``decide`` runs again on the fresh state, so a lost race surfaces as
        AlreadyCancelledException or InvalidTransitionException.
        """
        for _ in range(STATUS_WRITE_ATTEMPTS):
            next_status = decide(booking)
            expected = booking.status
            with self.transaction():
                claimed = self.repository.claim_status(booking.id, expected, next_status.value)
                if claimed:
                    apply_transition(booking, next_status, actor_id, reason)
            if claimed:
                return next_status

            self.logger.info(
                f"Booking {booking.id} left status {expected} before {next_status.value} "
                f"was written; re-checking"
            )
            try:
                self.repository.refresh(booking)
            except RepositoryException as e:
                raise StorageException(str(e)) from e

        raise InvalidTransitionException(
            booking.status,
            f"set status to {next_status.value}",
            role.value,
            reason="Booking is being changed by another request; try again",
        )

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(
        self, booking_id: str, user: CurrentUser, reason: Optional[str] = None
    ) -> Booking:
        """
        Cancel a booking on behalf of its customer or an admin.

        Raises:
            NotFoundException, ForbiddenException, AlreadyCancelledException,
            PastBookingException, InvalidTransitionException
        """
        booking = self._get_booking_or_404(booking_id)
        now = business_now()
        role = _role_of(user)

        def decide(current: Booking) -> BookingStatus:
            check_cancellation(current, user, now)
            return resolve_transition(current.status, BookingAction.CANCEL, role)

        self._commit_transition(booking, decide, user.id, role, reason)

        self.log_operation("booking_cancelled", booking_id=booking.id, by=user.id, role=role.value)
        self._notify(self.notification_service.notify_booking_cancelled, booking)
        return booking

    @BaseService.measure_operation("update_status")
    def update_status(
        self,
        booking_id: str,
        target_status: str,
        admin: CurrentUser,
        reason: Optional[str] = None,
    ) -> Booking:
        """
        Admin-driven status change.

        Cancellation here is not subject to the temporal guard; completing or
        marking no-show requires the appointment start to have passed.
        """
        if not admin.is_admin:
            raise ForbiddenException("Admin access required")

        booking = self._get_booking_or_404(booking_id)
        action = action_for_target(target_status)

        def decide(current: Booking) -> BookingStatus:
            return resolve_transition(
                current.status,
                action,
                RoleName.ADMIN,
                appointment_start=appointment_start(current),
                now=business_now(),
            )

        next_status = self._commit_transition(booking, decide, admin.id, RoleName.ADMIN, reason)

        self.log_operation(
            "booking_status_updated",
            booking_id=booking.id,
            status=next_status.value,
            by=admin.id,
        )
        if next_status is BookingStatus.CONFIRMED:
            self._notify(self.notification_service.notify_booking_confirmed, booking)
        elif next_status is BookingStatus.CANCELLED:
            self._notify(self.notification_service.notify_booking_cancelled, booking)
        return booking

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: str, user: CurrentUser) -> Booking:
        booking = self._get_booking_or_404(booking_id)
        if not (user.is_admin or booking.is_owned_by(user.id)):
            raise ForbiddenException("You don't have access to this booking")
        return booking

    @BaseService.measure_operation("get_bookings_for_customer")
    def get_bookings_for_customer(self, customer: CurrentUser) -> List[Booking]:
        try:
            return self.repository.get_customer_bookings(customer.id)
        except RepositoryException as e:
            raise StorageException(str(e)) from e

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        *,
        status: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        service_id: Optional[str] = None,
        staff_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Booking]:
        """Admin listing; date filters use the strict YYYY-MM-DD format."""
        if status is not None and status not in BookingStatus.values():
            raise InvalidInputException(
                f"Unknown status '{status}'", details={"allowed": BookingStatus.values()}
            )
        start = parse_booking_date(start_date) if start_date else None
        end = parse_booking_date(end_date) if end_date else None
        try:
            return self.repository.list_bookings(
                status=status,
                start_date=start,
                end_date=end,
                service_id=service_id,
                staff_id=staff_id,
                skip=skip,
                limit=limit,
            )
        except RepositoryException as e:
            raise StorageException(str(e)) from e
