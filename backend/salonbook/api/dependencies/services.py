# backend/salonbook/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from ...events import EventPublisher, build_default_publisher
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.cancellation_policy import CancellationPolicy
from ...services.schedule_service import ScheduleService
from .database import get_db


@lru_cache(maxsize=1)
def get_event_publisher() -> EventPublisher:
    """Process-wide publisher with the default handlers registered."""
    return build_default_publisher()


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> BookingService:
    """
    Get booking service instance with all dependencies.

    Args:
        db: Database session
        event_publisher: Publisher for post-commit booking events

    Returns:
        BookingService instance
    """
    return BookingService(db, event_publisher=event_publisher)


def get_cancellation_policy(
    db: Session = Depends(get_db),
    event_publisher: EventPublisher = Depends(get_event_publisher),
) -> CancellationPolicy:
    return CancellationPolicy(db, event_publisher=event_publisher)


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    return ScheduleService(db)
