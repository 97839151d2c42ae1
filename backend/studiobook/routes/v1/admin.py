# backend/studiobook/routes/v1/admin.py
"""
Admin booking management - API v1

Endpoints:
    GET /admin/bookings - Filtered booking list
    GET /admin/bookings/{booking_id} - One booking
    PATCH /admin/bookings/{booking_id} - Status change (confirm, cancel, complete, no-show)
    POST /admin/reminders/run - Trigger the reminder batch
    GET /admin/notifications/logs - Notification log
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.orm import Session

from ...api.dependencies import (
    get_booking_service,
    get_db,
    get_reminder_dispatcher,
    require_admin,
)
from ...core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ...core.exceptions import DomainException, RepositoryException, StorageException
from ...errors import handle_domain_exception
from ...repositories.notification_log_repository import NotificationLogRepository
from ...schemas.booking import BookingListResponse, BookingResponse, BookingStatusUpdate
from ...schemas.identity import CurrentUser
from ...schemas.notifications import (
    NotificationLogListResponse,
    NotificationLogResponse,
    ReminderRunResponse,
)
from ...services.booking_service import BookingService
from ...services.reminder_dispatcher import ReminderDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


@router.get("/bookings", response_model=BookingListResponse)
async def list_bookings(
    status: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    service_id: Optional[str] = Query(None),
    staff_id: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    _admin: CurrentUser = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    try:
        bookings = await asyncio.to_thread(
            booking_service.list_bookings,
            status=status,
            start_date=start_date,
            end_date=end_date,
            service_id=service_id,
            staff_id=staff_id,
            skip=skip,
            limit=limit,
        )
        return BookingListResponse.from_bookings(bookings)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str = Path(...),
    admin: CurrentUser = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, booking_id, admin)
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/bookings/{booking_id}", response_model=BookingResponse)
async def update_booking_status(
    booking_id: str = Path(...),
    update_data: BookingStatusUpdate = Body(...),
    admin: CurrentUser = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Move a booking through its lifecycle.

    Illegal moves return 400 INVALID_TRANSITION.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.update_status,
            booking_id,
            update_data.status,
            admin,
            update_data.reason,
        )
        return BookingResponse.from_booking(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/reminders/run", response_model=ReminderRunResponse)
async def run_reminders(
    _admin: CurrentUser = Depends(require_admin),
    dispatcher: ReminderDispatcher = Depends(get_reminder_dispatcher),
) -> ReminderRunResponse:
    try:
        result = await asyncio.to_thread(dispatcher.run_daily_reminders)
        return ReminderRunResponse(success=True, **result.to_dict())
    except DomainException as e:
        handle_domain_exception(e)


def _list_logs(
    db: Session,
    kind: Optional[str],
    status: Optional[str],
    booking_id: Optional[str],
    skip: int,
    limit: int,
) -> NotificationLogListResponse:
    try:
        logs = NotificationLogRepository(db).list_logs(
            kind=kind, status=status, booking_id=booking_id, skip=skip, limit=limit
        )
    except RepositoryException as e:
        raise StorageException(str(e)) from e
    return NotificationLogListResponse(
        logs=[NotificationLogResponse.model_validate(log) for log in logs],
        count=len(logs),
    )


@router.get("/notifications/logs", response_model=NotificationLogListResponse)
async def list_notification_logs(
    kind: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    booking_id: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    _admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
) -> NotificationLogListResponse:
    try:
        return await asyncio.to_thread(_list_logs, db, kind, status, booking_id, skip, limit)
    except DomainException as e:
        handle_domain_exception(e)
