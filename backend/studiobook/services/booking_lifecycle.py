# backend/studiobook/services/booking_lifecycle.py
"""
Booking status state machine.

All status changes go through ``resolve_transition``; handlers never
compare status strings themselves. The table is keyed by
(current status, action, actor role) and yields the next status.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from ..core.enums import RoleName
from ..core.exceptions import InvalidTransitionException
from ..models.booking import Booking, BookingStatus


class BookingAction(str, Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"
    COMPLETE = "complete"
    MARK_NO_SHOW = "mark_no_show"


ADMIN = RoleName.ADMIN
CUSTOMER = RoleName.CUSTOMER

TRANSITIONS: Dict[Tuple[BookingStatus, BookingAction, RoleName], BookingStatus] = {
    (BookingStatus.PENDING, BookingAction.CONFIRM, ADMIN): BookingStatus.CONFIRMED,
    (BookingStatus.PENDING, BookingAction.CANCEL, ADMIN): BookingStatus.CANCELLED,
    (BookingStatus.PENDING, BookingAction.CANCEL, CUSTOMER): BookingStatus.CANCELLED,
    (BookingStatus.CONFIRMED, BookingAction.CANCEL, ADMIN): BookingStatus.CANCELLED,
    (BookingStatus.CONFIRMED, BookingAction.CANCEL, CUSTOMER): BookingStatus.CANCELLED,
    (BookingStatus.CONFIRMED, BookingAction.COMPLETE, ADMIN): BookingStatus.COMPLETED,
    (BookingStatus.CONFIRMED, BookingAction.MARK_NO_SHOW, ADMIN): BookingStatus.NO_SHOW,
}

# Actions only allowed once the appointment start has passed
REQUIRES_ELAPSED = {BookingAction.COMPLETE, BookingAction.MARK_NO_SHOW}

# Target status requested by the admin endpoint -> action
ACTION_FOR_TARGET: Dict[BookingStatus, BookingAction] = {
    BookingStatus.CONFIRMED: BookingAction.CONFIRM,
    BookingStatus.CANCELLED: BookingAction.CANCEL,
    BookingStatus.COMPLETED: BookingAction.COMPLETE,
    BookingStatus.NO_SHOW: BookingAction.MARK_NO_SHOW,
}


def resolve_transition(
    current: str,
    action: BookingAction,
    role: RoleName,
    *,
    appointment_start: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> BookingStatus:
    """
    Next status for ``action`` taken by ``role`` on a booking in ``current``.

    Raises:
        InvalidTransitionException: when the table has no entry, or the action
            needs the appointment time to have elapsed and it has not
    """
    try:
        status = BookingStatus(current)
    except ValueError:
        raise InvalidTransitionException(current, action.value, role.value)

    next_status = TRANSITIONS.get((status, action, role))
    if next_status is None:
        raise InvalidTransitionException(status.value, action.value, role.value)

    if action in REQUIRES_ELAPSED:
        if appointment_start is None or now is None or now < appointment_start:
            raise InvalidTransitionException(
                status.value,
                action.value,
                role.value,
                reason="Appointment time has not passed yet",
            )
    return next_status


def action_for_target(target: str) -> BookingAction:
    try:
        return ACTION_FOR_TARGET[BookingStatus(target)]
    except (ValueError, KeyError):
        raise InvalidTransitionException("unknown", f"set status to {target}", ADMIN.value)


def apply_transition(
    booking: Booking,
    next_status: BookingStatus,
    actor_id: str,
    reason: Optional[str] = None,
) -> None:
    """Mutate ``booking`` into ``next_status`` with the matching timestamps."""
    if next_status is BookingStatus.CONFIRMED:
        booking.confirm()
    elif next_status is BookingStatus.CANCELLED:
        booking.cancel(actor_id, reason)
    elif next_status is BookingStatus.COMPLETED:
        booking.complete()
    elif next_status is BookingStatus.NO_SHOW:
        booking.mark_no_show()
