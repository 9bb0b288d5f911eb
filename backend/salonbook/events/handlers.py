"""Event handlers - default reactions to booking domain events."""
import logging
from typing import Any, Dict, List

from .publisher import EventHandler, EventPublisher

logger = logging.getLogger(__name__)


def handle_booking_created(event_type: str, payload: Dict[str, Any]) -> None:
    """Record the new booking for downstream confirmation delivery."""
    logger.info(
        "Booking %s confirmed for %s at %s",
        payload["booking_id"],
        payload["customer_email"],
        payload["start_at"],
        extra={"tenant_id": payload["tenant_id"], "event_type": event_type},
    )


def handle_booking_cancelled(event_type: str, payload: Dict[str, Any]) -> None:
    """
    Request a waiting-list notification for the freed slot.

    Delivery belongs to the notification system; this hook only emits the
    request.
    """
    logger.info(
        "Waitlist notification requested: staff %s freed %s - %s (booking %s)",
        payload["staff_id"],
        payload["start_at"],
        payload["end_at"],
        payload["booking_id"],
        extra={"tenant_id": payload["tenant_id"], "event_type": event_type},
    )


# Registry of event type -> handler functions
EVENT_HANDLERS: Dict[str, List[EventHandler]] = {
    "BookingCreated": [handle_booking_created],
    "BookingCancelled": [handle_booking_cancelled],
}


def build_default_publisher() -> EventPublisher:
    """Publisher wired with the default handlers."""
    return EventPublisher(EVENT_HANDLERS)
