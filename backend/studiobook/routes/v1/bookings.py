# backend/studiobook/routes/v1/bookings.py
"""
Customer booking routes - API v1

All business logic delegated to BookingService.

Endpoints:
    POST / - Create a booking for the authenticated customer
    GET /mine - The caller's bookings, newest first
    PATCH /{booking_id}/cancel - Cancel a booking
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, status

from ...api.dependencies import get_booking_service, get_current_user
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...schemas.booking import (
    BookingCancel,
    BookingCancelResponse,
    BookingCreate,
    BookingListResponse,
    BookingResponse,
)
from ...schemas.identity import CurrentUser
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate = Body(...),
    current_user: CurrentUser = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Create a booking.

    Staff is assigned automatically unless the request names one. A slot
    taken in the meantime returns 409 SLOT_UNAVAILABLE.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking, current_user, booking_data
        )
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/mine", response_model=BookingListResponse)
async def get_my_bookings(
    current_user: CurrentUser = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    try:
        bookings = await asyncio.to_thread(
            booking_service.get_bookings_for_customer, current_user
        )
        return BookingListResponse.from_bookings(bookings)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{booking_id}/cancel", response_model=BookingCancelResponse)
async def cancel_booking(
    booking_id: str = Path(..., description="Booking ULID"),
    cancel_data: Optional[BookingCancel] = Body(None),
    current_user: CurrentUser = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingCancelResponse:
    """
    Cancel a booking owned by the caller (admins may cancel any booking).

    Errors:
        403 FORBIDDEN, 404 NOT_FOUND, 400 ALREADY_CANCELLED, 400 PAST_BOOKING
    """
    try:
        reason = cancel_data.reason if cancel_data else None
        booking = await asyncio.to_thread(
            booking_service.cancel_booking, booking_id, current_user, reason
        )
        return BookingCancelResponse(
            success=True,
            message="Booking cancelled successfully",
            booking=BookingResponse.from_booking(booking),
        )
    except DomainException as e:
        handle_domain_exception(e)
