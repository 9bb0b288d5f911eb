# backend/salonbook/services/booking_service.py
"""
Booking Service for the SalonBook scheduling core.

Handles booking creation and the read paths around it:
- Instant booking (CONFIRMED on write) for customers and admins
- Upcoming bookings of a customer
- Filtered, paginated admin listing

Creation closes the check-then-write race inside one transaction:
lock the staff row, re-run the overlap query, insert. The partial unique
index and (on PostgreSQL) the exclusion constraint on bookings back this up;
their IntegrityError is reported as a booking conflict.
"""

from dataclasses import dataclass
from datetime import datetime
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import BookingConflictException, NotFoundException
from ..core.timezone_utils import ensure_utc, utc_now
from ..events import BookingCreated, EventPublisher, build_default_publisher
from ..models.booking import NO_OVERLAP_CONSTRAINT, UNIQUE_START_INDEX, Booking, BookingStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import ActingIdentity
from ..repositories import BookingFilters, RepositoryFactory
from .availability_service import AvailabilityService
from .base import BaseService

logger = logging.getLogger(__name__)

GENERIC_CONFLICT_MESSAGE = "This time slot conflicts with an existing booking"
STAFF_CONFLICT_MESSAGE = "Staff member already has a booking that overlaps this time"


@dataclass
class BookingRequest:
    """What a caller asks to book."""

    service_id: str
    staff_id: str
    customer_email: str
    start_at: datetime


@dataclass
class Pagination:
    page: int
    limit: int
    total: int
    pages: int

    def to_dict(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


@dataclass
class BookingPage:
    bookings: List[Booking]
    pagination: Pagination


class BookingService(BaseService):
    """
    Service layer for booking operations.

    The resolver runs first for a cheap, descriptive rejection; the locked
    re-check inside the transaction is what guarantees that no two CONFIRMED
    bookings of one staff member overlap.
    """

    def __init__(
        self,
        db: Session,
        availability_service: Optional[AvailabilityService] = None,
        event_publisher: Optional[EventPublisher] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            availability_service: Optional resolver (shares the session)
            event_publisher: Optional publisher for post-commit events
        """
        super().__init__(db)
        self.repository = RepositoryFactory.create_booking_repository(db)
        self.staff_repository = RepositoryFactory.create_staff_repository(db)
        self.availability_service = availability_service or AvailabilityService(db)
        self.event_publisher = event_publisher or build_default_publisher()

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self, tenant_id: str, request: BookingRequest, identity: ActingIdentity
    ) -> Booking:
        """
        Create an instant booking.

        Args:
            tenant_id: Owning tenant
            request: Service, staff, customer email and start
            identity: Customer (self-service) or admin

        Returns:
            Created booking with service and staff loaded

        Raises:
            NotFoundException: If service or staff not found
            CustomerBannedException: If a customer books for a banned email
            BookingConflictException: If the slot is taken
            StaffUnavailableException: If staff is off or outside working hours
        """
        customer_email = request.customer_email.strip().lower()
        start_at = ensure_utc(request.start_at)
        self.log_operation(
            "create_booking",
            tenant_id=tenant_id,
            staff_id=request.staff_id,
            service_id=request.service_id,
            start_at=start_at.isoformat(),
            acting_role=identity.role.value,
        )

        # 1. Resolve and validate (short-circuits on first failure)
        resolved = self.availability_service.check_availability(
            tenant_id,
            request.staff_id,
            request.service_id,
            start_at,
            customer_email,
            identity,
        )

        # 2. Write under the staff row lock
        created_by = customer_email if not identity.is_admin else identity.email
        try:
            with self.repository.transaction():
                self._lock_staff(tenant_id, request.staff_id)
                self.availability_service.ensure_no_overlap(
                    tenant_id,
                    request.staff_id,
                    resolved.start_at,
                    resolved.end_at,
                    source="locked_recheck",
                )
                booking = self.repository.create_booking(
                    tenant_id=tenant_id,
                    service_id=resolved.service.id,
                    staff_id=resolved.staff.id,
                    customer_email=customer_email,
                    start_at=resolved.start_at,
                    end_at=resolved.end_at,
                    status=BookingStatus.CONFIRMED.value,
                    created_by=created_by,
                    created_at=utc_now(),
                )
        except IntegrityError as exc:
            message = self._resolve_integrity_conflict_message(exc)
            prometheus_metrics.inc_booking_conflict("constraint")
            raise BookingConflictException(
                message=message,
                details=self._build_conflict_details(tenant_id, request, resolved.end_at),
            ) from exc

        # 3. Post-commit tasks
        self._handle_post_booking_tasks(tenant_id, booking)

        detailed_booking = self.repository.get_booking_with_details(tenant_id, booking.id)
        return detailed_booking or booking

    def _lock_staff(self, tenant_id: str, staff_id: str) -> None:
        if self.staff_repository.lock_staff(tenant_id, staff_id) is None:
            raise NotFoundException("Staff not found", details={"staff_id": staff_id})

    def _resolve_integrity_conflict_message(self, integrity_error: IntegrityError) -> str:
        """
        Determine the conflict message from a database IntegrityError.
        """
        constraint_name: str = ""
        orig = getattr(integrity_error, "orig", None)
        diag = getattr(orig, "diag", None)

        if diag is not None:
            constraint_name = getattr(diag, "constraint_name", "") or ""

        if not constraint_name and orig is not None:
            text = str(orig)
            if NO_OVERLAP_CONSTRAINT in text:
                constraint_name = NO_OVERLAP_CONSTRAINT
            elif UNIQUE_START_INDEX in text or "bookings.start_at" in text:
                constraint_name = UNIQUE_START_INDEX

        if constraint_name in (NO_OVERLAP_CONSTRAINT, UNIQUE_START_INDEX):
            return STAFF_CONFLICT_MESSAGE

        self.logger.error(f"Unexpected integrity error creating booking: {integrity_error}")
        return GENERIC_CONFLICT_MESSAGE

    def _build_conflict_details(
        self, tenant_id: str, request: BookingRequest, end_at: datetime
    ) -> Dict[str, Any]:
        return {
            "tenant_id": tenant_id,
            "staff_id": request.staff_id,
            "requested_start": ensure_utc(request.start_at).isoformat(),
            "requested_end": end_at.isoformat(),
        }

    def _handle_post_booking_tasks(self, tenant_id: str, booking: Booking) -> None:
        self.logger.info(
            f"Booking {booking.id} created for staff {booking.staff_id} "
            f"({booking.start_at.isoformat()} - {booking.end_at.isoformat()})"
        )
        self.event_publisher.publish(
            BookingCreated(
                tenant_id=tenant_id,
                booking_id=booking.id,
                staff_id=booking.staff_id,
                service_id=booking.service_id,
                customer_email=booking.customer_email,
                start_at=booking.start_at,
                end_at=booking.end_at,
                created_by=booking.created_by,
            )
        )

    @BaseService.measure_operation("get_booking")
    def get_booking(self, tenant_id: str, booking_id: str) -> Booking:
        """Booking by id in the tenant, with service and staff loaded."""
        booking = self.repository.get_booking_with_details(tenant_id, booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        return booking

    @BaseService.measure_operation("list_my_bookings")
    def list_my_bookings(
        self, tenant_id: str, customer_email: str, now: Optional[datetime] = None
    ) -> List[Booking]:
        """Future CONFIRMED bookings of a customer, soonest first."""
        reference = ensure_utc(now) if now is not None else utc_now()
        return self.repository.get_future_bookings_for_customer(
            tenant_id, customer_email.strip().lower(), reference
        )

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        tenant_id: str,
        filters: Optional[BookingFilters] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> BookingPage:
        """
        Admin listing with pagination.

        ``page`` is 1-based; ``limit`` defaults to the configured page size and
        is capped at ``settings.max_page_size``.
        """
        page, limit = self._normalize_paging(page, limit)
        bookings, total = self.repository.list_bookings(
            tenant_id, filters or BookingFilters(), page, limit
        )
        pages = math.ceil(total / limit) if total else 0
        return BookingPage(
            bookings=bookings,
            pagination=Pagination(page=page, limit=limit, total=total, pages=pages),
        )

    @staticmethod
    def _normalize_paging(page: int, limit: Optional[int]) -> Tuple[int, int]:
        normalized_page = max(page, 1)
        normalized_limit = limit or settings.default_page_size
        normalized_limit = max(1, min(normalized_limit, settings.max_page_size))
        return normalized_page, normalized_limit
