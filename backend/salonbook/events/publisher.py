"""Event publisher - delivers committed domain events to in-process handlers."""
from datetime import datetime
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


class Event(Protocol):
    """Protocol for event types."""

    def to_dict(self) -> Dict[str, Any]:
        ...


EventHandler = Callable[[str, Dict[str, Any]], None]


def serialize_event(event: Event) -> Dict[str, Any]:
    """Event payload with datetimes converted to ISO strings."""
    payload = event.to_dict()
    for key, value in payload.items():
        if isinstance(value, datetime):
            payload[key] = value.isoformat()
    return payload


class EventPublisher:
    """
    Publishes domain events to registered handlers.

    Handlers receive ``(event_type, payload)``. Publishing only happens after
    the owning transaction committed, so a failing handler is logged and
    never undoes the change that produced the event.
    """

    def __init__(self, handlers: Optional[Dict[str, List[EventHandler]]] = None):
        self._handlers: Dict[str, List[EventHandler]] = {
            event_type: list(callbacks) for event_type, callbacks in (handlers or {}).items()
        }

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def handlers_for(self, event_type: str) -> List[EventHandler]:
        return list(self._handlers.get(event_type, []))

    def publish(self, event: Event) -> int:
        """
        Deliver an event to every handler subscribed to its type.

        Returns:
            Number of handlers that completed without raising
        """
        event_type = type(event).__name__
        payload = serialize_event(event)

        delivered = 0
        for handler in self.handlers_for(event_type):
            try:
                handler(event_type, dict(payload))
                delivered += 1
            except Exception:
                logger.exception(
                    "Handler %s failed for %s",
                    getattr(handler, "__name__", repr(handler)),
                    event_type,
                )
        return delivered
