"""Booking domain events."""
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class BookingCreated:
    """Fired after a booking is successfully created."""

    tenant_id: str
    booking_id: str
    staff_id: str
    service_id: str
    customer_email: str
    start_at: datetime
    end_at: datetime
    created_by: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BookingCancelled:
    """Fired after a booking is cancelled; frees the slot for the waiting list."""

    tenant_id: str
    booking_id: str
    staff_id: str
    service_id: str
    start_at: datetime
    end_at: datetime
    cancelled_by: str
    cancelled_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
