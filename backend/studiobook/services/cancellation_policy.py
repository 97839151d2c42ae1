# backend/studiobook/services/cancellation_policy.py
"""
Cancellation policy checks, applied in a fixed order:

1. ownership: the customer who booked, or an admin
2. already cancelled: reported, never treated as success
3. temporal: appointments whose start is before now cannot be cancelled
"""

from datetime import datetime

from ..core.exceptions import AlreadyCancelledException, ForbiddenException, PastBookingException
from ..core.timezone_utils import combine_local
from ..models.booking import Booking, BookingStatus
from ..schemas.identity import CurrentUser


def appointment_start(booking: Booking) -> datetime:
    return combine_local(booking.booking_date, booking.booking_time)


def check_cancellation(booking: Booking, user: CurrentUser, now: datetime) -> None:
    """
    Raise if ``user`` may not cancel ``booking`` at ``now``.

    Raises:
        ForbiddenException: not the owner and not an admin
        AlreadyCancelledException: booking is already cancelled
        PastBookingException: appointment start is strictly before ``now``
    """
    if not (user.is_admin or booking.is_owned_by(user.id)):
        raise ForbiddenException(
            "You don't have permission to cancel this booking",
            details={"booking_id": booking.id},
        )
    if booking.status == BookingStatus.CANCELLED.value:
        raise AlreadyCancelledException(booking.id)
    if appointment_start(booking) < now:
        raise PastBookingException(booking.id)
