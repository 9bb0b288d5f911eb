# backend/salonbook/repositories/__init__.py
"""
Repository layer for the SalonBook scheduling core.

Repositories own all SQL. Services never query the session directly.
"""

from .base_repository import BaseRepository
from .booking_repository import BookingFilters, BookingRepository
from .conflict_checker_repository import ConflictCheckerRepository
from .customer_ban_repository import CustomerBanRepository
from .factory import RepositoryFactory
from .service_catalog_repository import ServiceCatalogRepository
from .staff_repository import StaffRepository

__all__ = [
    "BaseRepository",
    "BookingFilters",
    "BookingRepository",
    "ConflictCheckerRepository",
    "CustomerBanRepository",
    "RepositoryFactory",
    "ServiceCatalogRepository",
    "StaffRepository",
]
