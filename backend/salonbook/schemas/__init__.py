"""Pydantic request/response schemas."""

from .availability import AvailabilityResponse, AvailableSlotResponse
from .base_responses import ErrorResponse, PaginationInfo, PingResponse
from .booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingServiceInfo,
    BookingStaffInfo,
)
from .schedule import (
    CustomerBanCreate,
    CustomerBanResponse,
    ScheduleCreate,
    ScheduleResponse,
    TimeOffCreate,
    TimeOffResponse,
)

__all__ = [
    "AvailabilityResponse",
    "AvailableSlotResponse",
    "BookingCreate",
    "BookingListResponse",
    "BookingResponse",
    "BookingServiceInfo",
    "BookingStaffInfo",
    "CustomerBanCreate",
    "CustomerBanResponse",
    "ErrorResponse",
    "PaginationInfo",
    "PingResponse",
    "ScheduleCreate",
    "ScheduleResponse",
    "TimeOffCreate",
    "TimeOffResponse",
]
