# backend/salonbook/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import (
    get_acting_identity,
    get_optional_identity,
    get_tenant_id,
    require_admin,
    require_customer_email,
)
from .database import get_db
from .services import (
    get_availability_service,
    get_booking_service,
    get_cancellation_policy,
    get_event_publisher,
    get_schedule_service,
)

__all__ = [
    # Auth
    "get_acting_identity",
    "get_optional_identity",
    "get_tenant_id",
    "require_admin",
    "require_customer_email",
    # Database
    "get_db",
    # Services
    "get_availability_service",
    "get_booking_service",
    "get_cancellation_policy",
    "get_event_publisher",
    "get_schedule_service",
]
