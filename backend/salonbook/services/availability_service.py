# backend/salonbook/services/availability_service.py
"""
Availability Service for the SalonBook scheduling core.

Answers two questions:
- May this staff member be booked for this service starting at this instant?
  (``check_availability``, used by the booking writer before and inside its
  locking transaction)
- Which start times are still free on a given day? (``get_available_slots``)

Checks run in a fixed order and stop at the first failure:
service, staff, ban list (customers only), overlapping CONFIRMED bookings,
time off, and working hours (customers only).
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import (
    BookingConflictException,
    CustomerBannedException,
    NotFoundException,
    StaffUnavailableException,
)
from ..core.timezone_utils import (
    business_date,
    ensure_utc,
    local_midnight_utc,
    local_minute_to_utc,
    minute_of_day,
)
from ..models.booking import Booking
from ..models.service import Service
from ..models.staff import Schedule, Staff
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import ActingIdentity
from ..repositories import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass
class AvailabilityResult:
    """Resolved inputs of a bookable interval."""

    service: Service
    staff: Staff
    start_at: datetime
    end_at: datetime


@dataclass(frozen=True)
class AvailableSlot:
    staff_id: str
    staff_name: str
    start_at: datetime
    end_at: datetime


class AvailabilityService(BaseService):
    """
    Resolves whether a requested interval can be booked.

    Admin identities skip the active-flag checks, the ban list and the
    working-hours check. Overlap and time off apply to everyone.
    """

    def __init__(self, db: Session):
        super().__init__(db)
        self.service_repository = RepositoryFactory.create_service_catalog_repository(db)
        self.staff_repository = RepositoryFactory.create_staff_repository(db)
        self.conflict_repository = RepositoryFactory.create_conflict_checker_repository(db)
        self.ban_repository = RepositoryFactory.create_customer_ban_repository(db)

    @BaseService.measure_operation("check_availability")
    def check_availability(
        self,
        tenant_id: str,
        staff_id: str,
        service_id: str,
        start_at: datetime,
        customer_email: str,
        identity: ActingIdentity,
    ) -> AvailabilityResult:
        """
        Validate a requested booking interval.

        Args:
            tenant_id: Owning tenant
            staff_id: Requested staff member
            service_id: Requested service
            start_at: Requested start (naive values are UTC)
            customer_email: Email the booking is for
            identity: Who is acting

        Returns:
            AvailabilityResult with the computed end time

        Raises:
            NotFoundException: Unknown (or, for customers, inactive) service/staff
            CustomerBannedException: Customer email is banned in the tenant
            BookingConflictException: Overlaps a CONFIRMED booking
            StaffUnavailableException: Time off, or outside working hours
        """
        customer_path = not identity.is_admin
        start_at = ensure_utc(start_at)

        service = self.service_repository.get_service(
            tenant_id, service_id, active_only=customer_path
        )
        if service is None:
            raise NotFoundException("Service not found", details={"service_id": service_id})

        staff = self.staff_repository.get_staff(tenant_id, staff_id, active_only=customer_path)
        if staff is None:
            raise NotFoundException("Staff not found", details={"staff_id": staff_id})

        end_at = start_at + timedelta(minutes=service.duration_minutes)

        # Bans apply to customer self-service only; admins may book for anyone.
        if customer_path and self.ban_repository.is_banned(tenant_id, customer_email):
            self.logger.info(
                "Rejected booking for banned customer",
                extra={"tenant_id": tenant_id, "customer_email": customer_email},
            )
            raise CustomerBannedException(customer_email)

        self.ensure_no_overlap(tenant_id, staff_id, start_at, end_at, source="precheck")

        local_date = business_date(start_at)
        time_off = self.conflict_repository.get_time_off_covering(tenant_id, staff_id, local_date)
        if time_off is not None:
            raise StaffUnavailableException(
                "Staff member is not available on this date",
                details={
                    "staff_id": staff_id,
                    "date": local_date.isoformat(),
                    "time_off_id": time_off.id,
                },
            )

        if customer_path:
            self._ensure_within_schedule(tenant_id, staff_id, start_at, service.duration_minutes)

        return AvailabilityResult(service=service, staff=staff, start_at=start_at, end_at=end_at)

    def ensure_no_overlap(
        self,
        tenant_id: str,
        staff_id: str,
        start_at: datetime,
        end_at: datetime,
        source: str,
    ) -> None:
        """Raise BookingConflictException if a CONFIRMED booking overlaps the interval."""
        conflicts = self.conflict_repository.get_overlapping_bookings(
            tenant_id, staff_id, start_at, end_at
        )
        if not conflicts:
            return

        prometheus_metrics.inc_booking_conflict(source)
        self.logger.warning(
            f"Found {len(conflicts)} booking conflicts for staff {staff_id} "
            f"between {start_at.isoformat()}-{end_at.isoformat()}"
        )
        raise BookingConflictException(
            details={
                "staff_id": staff_id,
                "requested_start": start_at.isoformat(),
                "requested_end": end_at.isoformat(),
                "conflicting_booking_ids": [booking.id for booking in conflicts],
            }
        )

    def _ensure_within_schedule(
        self, tenant_id: str, staff_id: str, start_at: datetime, duration_minutes: int
    ) -> None:
        weekday = business_date(start_at).weekday()
        start_minute = minute_of_day(start_at)
        end_minute = start_minute + duration_minutes

        windows = self.staff_repository.get_schedules(tenant_id, staff_id, weekday=weekday)
        if any(window.contains(start_minute, end_minute) for window in windows):
            return

        raise StaffUnavailableException(
            "Requested time is outside the staff member's working hours",
            details={
                "staff_id": staff_id,
                "weekday": weekday,
                "start_minute": start_minute,
                "end_minute": end_minute,
            },
        )

    @BaseService.measure_operation("get_available_slots")
    def get_available_slots(
        self,
        tenant_id: str,
        service_id: str,
        target_date: date,
        staff_id: Optional[str] = None,
    ) -> List[AvailableSlot]:
        """
        Free start times for a service on a business-local date.

        Walks every schedule window of the day on the configured slot grid and
        keeps starts whose full interval fits the window and overlaps no
        CONFIRMED booking. Staff with time off that day are skipped.
        """
        service = self.service_repository.get_service(tenant_id, service_id, active_only=True)
        if service is None:
            raise NotFoundException("Service not found", details={"service_id": service_id})

        staff_members = self.staff_repository.list_active_staff(tenant_id, staff_id=staff_id)
        if staff_id and not staff_members:
            raise NotFoundException("Staff not found", details={"staff_id": staff_id})

        off_today = self.conflict_repository.get_staff_ids_off_on(tenant_id, target_date)
        candidates = [member for member in staff_members if member.id not in off_today]
        if not candidates:
            return []

        day_start = local_midnight_utc(target_date)
        day_end = local_midnight_utc(target_date + timedelta(days=1))
        booked: Dict[str, List[Booking]] = {member.id: [] for member in candidates}
        for booking in self.conflict_repository.get_confirmed_bookings_in_range(
            tenant_id, booked.keys(), day_start, day_end
        ):
            booked[booking.staff_id].append(booking)

        duration = timedelta(minutes=service.duration_minutes)
        weekday = target_date.weekday()
        slots: List[AvailableSlot] = []
        for member in candidates:
            windows = self.staff_repository.get_schedules(tenant_id, member.id, weekday=weekday)
            for start_at in self._grid_starts(target_date, windows, service.duration_minutes):
                end_at = start_at + duration
                if any(existing.overlaps(start_at, end_at) for existing in booked[member.id]):
                    continue
                slots.append(
                    AvailableSlot(
                        staff_id=member.id,
                        staff_name=member.name,
                        start_at=start_at,
                        end_at=end_at,
                    )
                )

        slots.sort(key=lambda slot: (slot.start_at, slot.staff_name))
        self.log_operation(
            "get_available_slots",
            tenant_id=tenant_id,
            service_id=service_id,
            target_date=target_date.isoformat(),
            slot_count=len(slots),
        )
        return slots

    def _grid_starts(
        self, target_date: date, windows: List[Schedule], duration_minutes: int
    ) -> List[datetime]:
        interval = settings.slot_interval_minutes
        starts: List[datetime] = []
        for window in windows:
            minute = window.start_minute
            while minute + duration_minutes <= window.end_minute:
                starts.append(local_minute_to_utc(target_date, minute))
                minute += interval
        return starts

