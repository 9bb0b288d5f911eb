# backend/salonbook/repositories/factory.py
"""
Repository Factory for the SalonBook scheduling core.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from sqlalchemy.orm import Session

from .booking_repository import BookingRepository
from .conflict_checker_repository import ConflictCheckerRepository
from .customer_ban_repository import CustomerBanRepository
from .service_catalog_repository import ServiceCatalogRepository
from .staff_repository import StaffRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_booking_repository(db: Session) -> BookingRepository:
        """Create repository for booking operations."""
        return BookingRepository(db)

    @staticmethod
    def create_conflict_checker_repository(db: Session) -> ConflictCheckerRepository:
        """Create repository for overlap and time-off checks."""
        return ConflictCheckerRepository(db)

    @staticmethod
    def create_staff_repository(db: Session) -> StaffRepository:
        """Create repository for staff, schedules and time off."""
        return StaffRepository(db)

    @staticmethod
    def create_service_catalog_repository(db: Session) -> ServiceCatalogRepository:
        """Create repository for bookable services."""
        return ServiceCatalogRepository(db)

    @staticmethod
    def create_customer_ban_repository(db: Session) -> CustomerBanRepository:
        """Create repository for the customer ban list."""
        return CustomerBanRepository(db)
