# backend/salonbook/models/__init__.py
"""
SQLAlchemy models for the SalonBook scheduling core.

Importing this package registers every mapper on ``Base.metadata``.
"""

from .booking import Booking, BookingStatus
from .customer_ban import CustomerBan
from .service import Service
from .staff import Schedule, Staff, TimeOff

__all__ = [
    "Booking",
    "BookingStatus",
    "CustomerBan",
    "Schedule",
    "Service",
    "Staff",
    "TimeOff",
]
