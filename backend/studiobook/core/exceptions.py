# backend/studiobook/core/exceptions.py
"""
Domain-specific exceptions for the studio booking platform.

Every exception carries a stable ``code`` so API clients can decide
whether to retry (e.g. re-query slots after SLOT_UNAVAILABLE) or stop.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHORIZED"

    def to_http_exception(self) -> HTTPException:
        exc = super().to_http_exception()
        exc.headers = {"WWW-Authenticate": "Bearer"}
        return exc


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific scheduling exceptions


class InvalidInputException(ValidationException):
    """Malformed or missing request fields."""

    default_code = "INVALID_INPUT"


class InvalidDateException(ValidationException):
    """Date is unparseable or earlier than today in the business calendar."""

    default_code = "INVALID_DATE"


class SlotUnavailableException(ConflictException):
    """Raised when the requested (staff, date, time) is already occupied."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message
            or "This time slot is no longer available. Please choose another time.",
            code="SLOT_UNAVAILABLE",
            details=details or {},
        )


class AlreadyCancelledException(BusinessRuleException):
    def __init__(self, booking_id: str):
        super().__init__(
            message="Booking is already cancelled",
            code="ALREADY_CANCELLED",
            details={"booking_id": booking_id},
        )


class PastBookingException(BusinessRuleException):
    def __init__(self, booking_id: str):
        super().__init__(
            message="Cannot cancel past bookings",
            code="PAST_BOOKING",
            details={"booking_id": booking_id},
        )


class InvalidTransitionException(BusinessRuleException):
    """Raised when a status transition is not allowed for the actor."""

    def __init__(self, current: str, action: str, role: str, reason: Optional[str] = None):
        super().__init__(
            message=reason or f"Cannot {action} a booking that is {current}",
            code="INVALID_TRANSITION",
            details={"current_status": current, "action": action, "role": role},
        )


class StorageException(ServiceException):
    """Unexpected persistence failure."""

    default_code = "STORAGE_ERROR"


class NotificationException(DomainException):
    """Outbound notification failed. Never surfaced to HTTP callers."""

    default_code = "NOTIFICATION_ERROR"


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as connection issues or
    query failures. Services translate it into StorageException.
    """
