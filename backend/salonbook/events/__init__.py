"""Booking domain events and their in-process publisher."""

from .booking_events import BookingCancelled, BookingCreated
from .handlers import EVENT_HANDLERS, build_default_publisher
from .publisher import EventPublisher

__all__ = [
    "BookingCancelled",
    "BookingCreated",
    "EVENT_HANDLERS",
    "EventPublisher",
    "build_default_publisher",
]
