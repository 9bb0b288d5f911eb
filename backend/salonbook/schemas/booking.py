# backend/salonbook/schemas/booking.py
"""
Booking schemas for the SalonBook scheduling core.

Request bodies accept both snake_case and the camelCase names used by the
web client (``serviceId``, ``staffId``, ``customerEmail``, ``start``).
Bookings are self-contained: end_at is stored with the row and reported
as-is.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, EmailStr, Field, field_validator

from ..core.timezone_utils import ensure_utc
from ..models.booking import BookingStatus
from ._strict_base import StrictModel, StrictRequestModel
from .base_responses import PaginationInfo


class BookingCreate(StrictRequestModel):
    """Instant booking request (customer self-service and admin)."""

    service_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("service_id", "serviceId"),
        description="Service to book",
    )
    staff_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("staff_id", "staffId"),
        description="Staff member to book",
    )
    customer_email: EmailStr = Field(
        ...,
        validation_alias=AliasChoices("customer_email", "customerEmail"),
        description="Email of the customer the booking is for",
    )
    start_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("start_at", "start"),
        description="Start instant (ISO 8601; naive values are UTC)",
    )

    @field_validator("start_at")
    @classmethod
    def _normalize_start(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_validator("customer_email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()


class BookingServiceInfo(StrictModel):
    id: str
    name: str
    duration_minutes: int


class BookingStaffInfo(StrictModel):
    id: str
    name: str


class BookingResponse(StrictModel):
    """Booking as returned by the API."""

    id: str
    tenant_id: str
    service_id: str
    staff_id: str
    customer_email: str
    start_at: datetime
    end_at: datetime
    status: BookingStatus
    created_by: Optional[str] = None
    cancelled_by: Optional[str] = None
    created_at: datetime
    cancelled_at: Optional[datetime] = None
    service: Optional[BookingServiceInfo] = None
    staff: Optional[BookingStaffInfo] = None


class BookingListResponse(StrictModel):
    """Admin listing: ``{bookings, pagination}``."""

    bookings: List[BookingResponse]
    pagination: PaginationInfo
