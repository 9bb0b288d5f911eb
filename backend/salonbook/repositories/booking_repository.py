# backend/salonbook/repositories/booking_repository.py
"""
Booking Repository for the SalonBook scheduling core.

This repository handles:
- Booking creation (integrity errors surface to the writer for conflict mapping)
- Tenant-scoped lookups with service/staff eager loading
- Customer "my bookings" and admin listing with pagination
"""

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any, List, Optional, Tuple, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


@dataclass
class BookingFilters:
    """Admin listing filters; every field is optional."""

    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    staff_id: Optional[str] = None
    status: Optional[BookingStatus] = None


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        """Initialize with Booking model."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def _with_details(self, query: Query) -> Query:
        return query.options(joinedload(Booking.service), joinedload(Booking.staff))

    def get_booking_with_details(self, tenant_id: str, booking_id: str) -> Optional[Booking]:
        """Get a booking with service and staff loaded."""
        try:
            return cast(
                Optional[Booking],
                self._with_details(self._tenant_query(tenant_id))
                .filter(Booking.id == booking_id)
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to get booking: {str(e)}")

    def get_booking_for_update(self, tenant_id: str, booking_id: str) -> Optional[Booking]:
        """Get a booking row locked for the rest of the transaction."""
        try:
            return cast(
                Optional[Booking],
                self._tenant_query(tenant_id)
                .filter(Booking.id == booking_id)
                .with_for_update()
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock booking: {str(e)}")

    def get_future_bookings_for_customer(
        self, tenant_id: str, customer_email: str, now: datetime
    ) -> List[Booking]:
        """Future CONFIRMED bookings of a customer, soonest first."""
        try:
            return cast(
                List[Booking],
                self._with_details(self._tenant_query(tenant_id))
                .filter(
                    Booking.customer_email == customer_email,
                    Booking.status == BookingStatus.CONFIRMED.value,
                    Booking.start_at >= now,
                )
                .order_by(Booking.start_at)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting customer bookings: {str(e)}")
            raise RepositoryException(f"Failed to get customer bookings: {str(e)}")

    def list_bookings(
        self, tenant_id: str, filters: BookingFilters, page: int, limit: int
    ) -> Tuple[List[Booking], int]:
        """
        Filtered, paginated admin listing ordered by start.

        ``date_from``/``date_to`` are both inclusive bounds on start_at.

        Returns:
            (bookings on the requested page, total matching rows)
        """
        try:
            query = self._tenant_query(tenant_id)
            if filters.date_from is not None:
                query = query.filter(Booking.start_at >= filters.date_from)
            if filters.date_to is not None:
                query = query.filter(Booking.start_at <= filters.date_to)
            if filters.staff_id:
                query = query.filter(Booking.staff_id == filters.staff_id)
            if filters.status is not None:
                query = query.filter(Booking.status == BookingStatus(filters.status).value)

            total = query.count()
            items = (
                self._with_details(query)
                .order_by(Booking.start_at, Booking.id)
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            return cast(List[Booking], items), total
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def create_booking(self, **kwargs: Any) -> Booking:
        """Insert a booking row (flush only; commit belongs to the caller)."""
        return self.create(**kwargs)
