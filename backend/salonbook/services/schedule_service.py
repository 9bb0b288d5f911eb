# backend/salonbook/services/schedule_service.py
"""
Schedule Service for the SalonBook scheduling core.

Admin-side management of the inputs the availability resolver reads:
weekly working windows, time-off ranges and the customer ban list.
"""

from datetime import date
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..models.customer_ban import CustomerBan
from ..models.staff import Schedule, Staff, TimeOff
from ..repositories import RepositoryFactory
from ..repositories.customer_ban_repository import normalize_email
from .base import BaseService

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60


def _validate_window(weekday: int, start_minute: int, end_minute: int) -> None:
    if not 0 <= weekday <= 6:
        raise ValidationException(
            "weekday must be between 0 (Monday) and 6 (Sunday)",
            details={"weekday": weekday},
        )
    if not (0 <= start_minute < end_minute <= MINUTES_PER_DAY):
        raise ValidationException(
            "start_minute must be before end_minute within one day",
            details={"start_minute": start_minute, "end_minute": end_minute},
        )


def _validate_date_range(date_from: date, date_to: date) -> None:
    if date_from > date_to:
        raise ValidationException(
            "date_from must be on or before date_to",
            details={"date_from": date_from.isoformat(), "date_to": date_to.isoformat()},
        )


class ScheduleService(BaseService):
    """Working hours, time off and bans for one tenant at a time."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.staff_repository = RepositoryFactory.create_staff_repository(db)
        self.ban_repository = RepositoryFactory.create_customer_ban_repository(db)

    def _get_staff_or_404(self, tenant_id: str, staff_id: str) -> Staff:
        staff = self.staff_repository.get_staff(tenant_id, staff_id)
        if staff is None:
            raise NotFoundException("Staff not found", details={"staff_id": staff_id})
        return staff

    # Schedules

    @BaseService.measure_operation("list_schedules")
    def list_schedules(self, tenant_id: str, staff_id: str) -> List[Schedule]:
        self._get_staff_or_404(tenant_id, staff_id)
        return self.staff_repository.get_schedules(tenant_id, staff_id)

    @BaseService.measure_operation("add_schedule")
    def add_schedule(
        self, tenant_id: str, staff_id: str, weekday: int, start_minute: int, end_minute: int
    ) -> Schedule:
        """
        Add a weekly working window.

        Raises:
            ValidationException: weekday outside 0-6 or an empty/out-of-day window
            ConflictException: overlaps another window on the same weekday
            NotFoundException: unknown staff
        """
        _validate_window(weekday, start_minute, end_minute)
        self._get_staff_or_404(tenant_id, staff_id)

        with self.transaction():
            self._ensure_no_schedule_overlap(tenant_id, staff_id, weekday, start_minute, end_minute)
            schedule = self.staff_repository.add_schedule(
                tenant_id, staff_id, weekday, start_minute, end_minute
            )

        self.log_operation(
            "add_schedule",
            tenant_id=tenant_id,
            staff_id=staff_id,
            weekday=weekday,
            start_minute=start_minute,
            end_minute=end_minute,
        )
        return schedule

    @BaseService.measure_operation("update_schedule")
    def update_schedule(
        self,
        tenant_id: str,
        staff_id: str,
        schedule_id: str,
        weekday: int,
        start_minute: int,
        end_minute: int,
    ) -> Schedule:
        """
        Replace a working window in place.

        Same rules as ``add_schedule``; the window being edited does not count
        as an overlap with itself.
        """
        _validate_window(weekday, start_minute, end_minute)
        self._get_staff_or_404(tenant_id, staff_id)
        schedule = self.staff_repository.get_schedule(tenant_id, staff_id, schedule_id)
        if schedule is None:
            raise NotFoundException("Schedule not found", details={"schedule_id": schedule_id})

        with self.transaction():
            self._ensure_no_schedule_overlap(
                tenant_id, staff_id, weekday, start_minute, end_minute, exclude_schedule_id=schedule.id
            )
            self.staff_repository.update(
                schedule, weekday=weekday, start_minute=start_minute, end_minute=end_minute
            )

        self.log_operation(
            "update_schedule",
            tenant_id=tenant_id,
            staff_id=staff_id,
            schedule_id=schedule_id,
            weekday=weekday,
            start_minute=start_minute,
            end_minute=end_minute,
        )
        return schedule

    @BaseService.measure_operation("delete_schedule")
    def delete_schedule(self, tenant_id: str, staff_id: str, schedule_id: str) -> None:
        self._get_staff_or_404(tenant_id, staff_id)
        schedule = self.staff_repository.get_schedule(tenant_id, staff_id, schedule_id)
        if schedule is None:
            raise NotFoundException("Schedule not found", details={"schedule_id": schedule_id})
        with self.transaction():
            self.staff_repository.remove(schedule)

    def _ensure_no_schedule_overlap(
        self,
        tenant_id: str,
        staff_id: str,
        weekday: int,
        start_minute: int,
        end_minute: int,
        exclude_schedule_id: Optional[str] = None,
    ) -> None:
        existing = self.staff_repository.find_overlapping_schedule(
            tenant_id, staff_id, weekday, start_minute, end_minute, exclude_schedule_id
        )
        if existing is not None:
            raise ConflictException(
                "Schedule overlaps an existing window on this weekday",
                code="SCHEDULE_OVERLAP",
                details={"schedule_id": existing.id, "weekday": weekday},
            )

    # Time off

    @BaseService.measure_operation("list_time_off")
    def list_time_off(self, tenant_id: str, staff_id: str) -> List[TimeOff]:
        self._get_staff_or_404(tenant_id, staff_id)
        return self.staff_repository.get_time_offs(tenant_id, staff_id)

    @BaseService.measure_operation("add_time_off")
    def add_time_off(
        self,
        tenant_id: str,
        staff_id: str,
        date_from: date,
        date_to: date,
        reason: Optional[str] = None,
    ) -> TimeOff:
        _validate_date_range(date_from, date_to)
        self._get_staff_or_404(tenant_id, staff_id)

        with self.transaction():
            time_off = self.staff_repository.add_time_off(
                tenant_id, staff_id, date_from, date_to, reason
            )

        self.log_operation(
            "add_time_off",
            tenant_id=tenant_id,
            staff_id=staff_id,
            date_from=date_from.isoformat(),
            date_to=date_to.isoformat(),
        )
        return time_off

    @BaseService.measure_operation("update_time_off")
    def update_time_off(
        self,
        tenant_id: str,
        staff_id: str,
        time_off_id: str,
        date_from: date,
        date_to: date,
        reason: Optional[str] = None,
    ) -> TimeOff:
        _validate_date_range(date_from, date_to)
        self._get_staff_or_404(tenant_id, staff_id)
        time_off = self.staff_repository.get_time_off(tenant_id, staff_id, time_off_id)
        if time_off is None:
            raise NotFoundException("Time off not found", details={"time_off_id": time_off_id})

        with self.transaction():
            self.staff_repository.update(
                time_off, date_from=date_from, date_to=date_to, reason=reason
            )

        self.log_operation(
            "update_time_off",
            tenant_id=tenant_id,
            staff_id=staff_id,
            time_off_id=time_off_id,
            date_from=date_from.isoformat(),
            date_to=date_to.isoformat(),
        )
        return time_off

    @BaseService.measure_operation("delete_time_off")
    def delete_time_off(self, tenant_id: str, staff_id: str, time_off_id: str) -> None:
        self._get_staff_or_404(tenant_id, staff_id)
        time_off = self.staff_repository.get_time_off(tenant_id, staff_id, time_off_id)
        if time_off is None:
            raise NotFoundException("Time off not found", details={"time_off_id": time_off_id})
        with self.transaction():
            self.staff_repository.remove(time_off)

    # Customer bans

    @BaseService.measure_operation("list_bans")
    def list_bans(self, tenant_id: str) -> List[CustomerBan]:
        return self.ban_repository.list_bans(tenant_id)

    @BaseService.measure_operation("ban_customer")
    def ban_customer(self, tenant_id: str, email: str, reason: Optional[str] = None) -> CustomerBan:
        """Ban an email from self-service booking. Banning twice is a 409."""
        existing = self.ban_repository.get_ban(tenant_id, email)
        if existing is not None:
            raise ConflictException(
                "Customer is already banned",
                code="ALREADY_BANNED",
                details={"email": existing.email},
            )
        try:
            with self.transaction():
                ban = self.ban_repository.add_ban(tenant_id, email, reason)
        except IntegrityError as exc:
            raise ConflictException(
                "Customer is already banned",
                code="ALREADY_BANNED",
                details={"email": normalize_email(email)},
            ) from exc

        self.log_operation("ban_customer", tenant_id=tenant_id, customer_email=ban.email)
        return ban

    @BaseService.measure_operation("unban_customer")
    def unban_customer(self, tenant_id: str, email: str) -> None:
        with self.transaction():
            removed = self.ban_repository.remove_ban(tenant_id, email)
        if not removed:
            raise NotFoundException("Ban not found", details={"email": normalize_email(email)})
        self.log_operation("unban_customer", tenant_id=tenant_id, customer_email=email)
