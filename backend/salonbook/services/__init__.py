# backend/salonbook/services/__init__.py
"""Service layer: business rules on top of the repositories."""

from .availability_service import AvailabilityResult, AvailabilityService, AvailableSlot
from .base import BaseService
from .booking_service import BookingPage, BookingRequest, BookingService, Pagination
from .cancellation_policy import CancellationPolicy
from .schedule_service import ScheduleService

__all__ = [
    "AvailabilityResult",
    "AvailabilityService",
    "AvailableSlot",
    "BaseService",
    "BookingPage",
    "BookingRequest",
    "BookingService",
    "CancellationPolicy",
    "Pagination",
    "ScheduleService",
]
