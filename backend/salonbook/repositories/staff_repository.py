# backend/salonbook/repositories/staff_repository.py
"""
Staff Repository for the SalonBook scheduling core.

Covers staff lookups (including the locking read used to serialize booking
writes per staff member), weekly schedules and time-off ranges.
"""

from datetime import date
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.staff import Schedule, Staff, TimeOff
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class StaffRepository(BaseRepository[Staff]):
    """Repository for staff, schedule and time-off data access."""

    def __init__(self, db: Session):
        super().__init__(db, Staff)
        self.logger = logging.getLogger(__name__)

    # Staff

    def get_staff(self, tenant_id: str, staff_id: str, active_only: bool = False) -> Optional[Staff]:
        """Resolve a staff member by id in the tenant, optionally requiring active."""
        try:
            query = self._tenant_query(tenant_id).filter(Staff.id == staff_id)
            if active_only:
                query = query.filter(Staff.active.is_(True))
            return cast(Optional[Staff], query.first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting staff {staff_id}: {str(e)}")
            raise RepositoryException(f"Failed to get staff: {str(e)}")

    def lock_staff(self, tenant_id: str, staff_id: str) -> Optional[Staff]:
        """
        ``SELECT ... FOR UPDATE`` on the staff row.

        Concurrent booking writers for the same staff member queue here, so the
        overlap re-check that follows sees every committed booking.
        """
        try:
            return cast(
                Optional[Staff],
                self._tenant_query(tenant_id)
                .filter(Staff.id == staff_id)
                .with_for_update()
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking staff {staff_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock staff: {str(e)}")

    def list_active_staff(self, tenant_id: str, staff_id: Optional[str] = None) -> List[Staff]:
        """Active staff of the tenant, optionally narrowed to one id, by name."""
        try:
            query = self._tenant_query(tenant_id).filter(Staff.active.is_(True))
            if staff_id:
                query = query.filter(Staff.id == staff_id)
            return cast(List[Staff], query.order_by(Staff.name).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing staff: {str(e)}")
            raise RepositoryException(f"Failed to list staff: {str(e)}")

    # Schedules

    def get_schedules(
        self, tenant_id: str, staff_id: str, weekday: Optional[int] = None
    ) -> List[Schedule]:
        """Schedule windows of a staff member, ordered by weekday then start."""
        try:
            query = self.db.query(Schedule).filter(
                Schedule.tenant_id == tenant_id,
                Schedule.staff_id == staff_id,
            )
            if weekday is not None:
                query = query.filter(Schedule.weekday == weekday)
            return cast(
                List[Schedule],
                query.order_by(Schedule.weekday, Schedule.start_minute).all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting schedules: {str(e)}")
            raise RepositoryException(f"Failed to get schedules: {str(e)}")

    def find_overlapping_schedule(
        self,
        tenant_id: str,
        staff_id: str,
        weekday: int,
        start_minute: int,
        end_minute: int,
        exclude_schedule_id: Optional[str] = None,
    ) -> Optional[Schedule]:
        """
        Another window on the same weekday overlapping ``[start_minute, end_minute)``.

        ``exclude_schedule_id`` leaves the window being edited out of the check.
        """
        try:
            query = self.db.query(Schedule).filter(
                Schedule.tenant_id == tenant_id,
                Schedule.staff_id == staff_id,
                Schedule.weekday == weekday,
                Schedule.start_minute < end_minute,
                Schedule.end_minute > start_minute,
            )
            if exclude_schedule_id:
                query = query.filter(Schedule.id != exclude_schedule_id)
            return cast(Optional[Schedule], query.first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking schedule overlap: {str(e)}")
            raise RepositoryException(f"Failed to check schedule overlap: {str(e)}")

    def get_schedule(self, tenant_id: str, staff_id: str, schedule_id: str) -> Optional[Schedule]:
        try:
            return cast(
                Optional[Schedule],
                self.db.query(Schedule)
                .filter(
                    Schedule.tenant_id == tenant_id,
                    Schedule.staff_id == staff_id,
                    Schedule.id == schedule_id,
                )
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting schedule {schedule_id}: {str(e)}")
            raise RepositoryException(f"Failed to get schedule: {str(e)}")

    def add_schedule(
        self, tenant_id: str, staff_id: str, weekday: int, start_minute: int, end_minute: int
    ) -> Schedule:
        try:
            schedule = Schedule(
                tenant_id=tenant_id,
                staff_id=staff_id,
                weekday=weekday,
                start_minute=start_minute,
                end_minute=end_minute,
            )
            self.db.add(schedule)
            self.db.flush()
            return schedule
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating schedule: {str(e)}")
            raise RepositoryException(f"Failed to create schedule: {str(e)}")

    # Time off

    def get_time_offs(self, tenant_id: str, staff_id: str) -> List[TimeOff]:
        try:
            return cast(
                List[TimeOff],
                self.db.query(TimeOff)
                .filter(TimeOff.tenant_id == tenant_id, TimeOff.staff_id == staff_id)
                .order_by(TimeOff.date_from)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting time off: {str(e)}")
            raise RepositoryException(f"Failed to get time off: {str(e)}")

    def get_time_off(self, tenant_id: str, staff_id: str, time_off_id: str) -> Optional[TimeOff]:
        try:
            return cast(
                Optional[TimeOff],
                self.db.query(TimeOff)
                .filter(
                    TimeOff.tenant_id == tenant_id,
                    TimeOff.staff_id == staff_id,
                    TimeOff.id == time_off_id,
                )
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting time off {time_off_id}: {str(e)}")
            raise RepositoryException(f"Failed to get time off: {str(e)}")

    def add_time_off(
        self,
        tenant_id: str,
        staff_id: str,
        date_from: date,
        date_to: date,
        reason: Optional[str] = None,
    ) -> TimeOff:
        try:
            time_off = TimeOff(
                tenant_id=tenant_id,
                staff_id=staff_id,
                date_from=date_from,
                date_to=date_to,
                reason=reason,
            )
            self.db.add(time_off)
            self.db.flush()
            return time_off
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating time off: {str(e)}")
            raise RepositoryException(f"Failed to create time off: {str(e)}")

    def remove(self, entity: Schedule | TimeOff) -> None:
        """Delete a schedule or time-off row already resolved in the tenant."""
        try:
            self.db.delete(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting {type(entity).__name__}: {str(e)}")
            raise RepositoryException(f"Failed to delete {type(entity).__name__}: {str(e)}")
