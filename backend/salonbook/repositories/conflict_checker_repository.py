# backend/salonbook/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for the SalonBook scheduling core.

All conflict checking works on the booking's own stored interval
(start_at, end_at) using the half-open overlap test:

    existing.start_at < end_at AND existing.end_at > start_at

so back-to-back bookings never conflict. Only CONFIRMED bookings block.
"""

from datetime import date, datetime
import logging
from typing import Iterable, List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from ..models.staff import TimeOff
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConflictCheckerRepository(BaseRepository[Booking]):
    """
    Repository for conflict checking data access.

    Holds the overlap and time-off queries used by the availability resolver
    and re-run by the booking writer inside its locking transaction.
    """

    def __init__(self, db: Session):
        """Initialize with Booking model as primary."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    # Booking Conflict Queries

    def get_overlapping_bookings(
        self,
        tenant_id: str,
        staff_id: str,
        start_at: datetime,
        end_at: datetime,
    ) -> List[Booking]:
        """
        Get CONFIRMED bookings of a staff member overlapping ``[start_at, end_at)``.

        Args:
            tenant_id: Owning tenant
            staff_id: The staff member to check
            start_at: Range start (inclusive)
            end_at: Range end (exclusive)

        Returns:
            Overlapping bookings ordered by start
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.tenant_id == tenant_id,
                Booking.staff_id == staff_id,
                Booking.status == BookingStatus.CONFIRMED.value,
                Booking.start_at < end_at,
                Booking.end_at > start_at,
            )
            return cast(List[Booking], query.order_by(Booking.start_at).all())

        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get conflict bookings: {str(e)}")

    def get_confirmed_bookings_in_range(
        self,
        tenant_id: str,
        staff_ids: Iterable[str],
        range_start: datetime,
        range_end: datetime,
    ) -> List[Booking]:
        """CONFIRMED bookings of several staff members overlapping a range."""
        staff_id_list = list(staff_ids)
        if not staff_id_list:
            return []
        try:
            return cast(
                List[Booking],
                self.db.query(Booking)
                .filter(
                    Booking.tenant_id == tenant_id,
                    Booking.staff_id.in_(staff_id_list),
                    Booking.status == BookingStatus.CONFIRMED.value,
                    Booking.start_at < range_end,
                    Booking.end_at > range_start,
                )
                .order_by(Booking.staff_id, Booking.start_at)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings in range: {str(e)}")
            raise RepositoryException(f"Failed to get bookings: {str(e)}")

    # Time-off Queries

    def get_time_off_covering(
        self, tenant_id: str, staff_id: str, target_date: date
    ) -> Optional[TimeOff]:
        """
        Return a time-off row whose inclusive range contains ``target_date``.

        Args:
            tenant_id: Owning tenant
            staff_id: The staff member
            target_date: The (business-local) calendar date

        Returns:
            TimeOff if the staff member is off that day, None otherwise
        """
        try:
            result = (
                self.db.query(TimeOff)
                .filter(
                    TimeOff.tenant_id == tenant_id,
                    TimeOff.staff_id == staff_id,
                    TimeOff.date_from <= target_date,
                    TimeOff.date_to >= target_date,
                )
                .first()
            )
            return cast(Optional[TimeOff], result)
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking time off: {str(e)}")
            raise RepositoryException(f"Failed to check time off: {str(e)}")

    def get_staff_ids_off_on(self, tenant_id: str, target_date: date) -> set[str]:
        """Ids of every staff member in the tenant with time off on ``target_date``."""
        try:
            rows = (
                self.db.query(TimeOff.staff_id)
                .filter(
                    TimeOff.tenant_id == tenant_id,
                    TimeOff.date_from <= target_date,
                    TimeOff.date_to >= target_date,
                )
                .distinct()
                .all()
            )
            return {row[0] for row in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing staff on time off: {str(e)}")
            raise RepositoryException(f"Failed to list time off: {str(e)}")
