# backend/salonbook/core/exceptions.py
"""
Domain-specific exceptions for the SalonBook scheduling core.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code, "details": self.details}

    def to_http_exception(self) -> HTTPException:
        """Convert to HTTPException using the subclass status code."""
        return HTTPException(status_code=self.status_code, detail=self.to_dict())


class ValidationException(DomainException):
    """Raised when input shape or a business policy check fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedException(DomainException):
    """Raised when no acting identity is present."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when the acting identity lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a booking overlaps an existing confirmed booking."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class StaffUnavailableException(ConflictException):
    """Raised when staff is on time off or outside working hours."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="STAFF_UNAVAILABLE", details=details or {})


class CustomerBannedException(ForbiddenException):
    """Raised when a banned customer attempts to book."""

    def __init__(self, email: str):
        super().__init__(
            message="Customer is not allowed to book",
            code="CUSTOMER_BANNED",
            details={"customer_email": email},
        )


class CancellationWindowException(ValidationException):
    """Raised when a customer cancels inside the cutoff window."""

    def __init__(self, cutoff_hours: int, hours_until: float):
        super().__init__(
            message=f"Too late to cancel (<{cutoff_hours}h before start)",
            code="TOO_LATE_TO_CANCEL",
            details={
                "cutoff_hours": cutoff_hours,
                "hours_until_start": round(hours_until, 2),
            },
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
