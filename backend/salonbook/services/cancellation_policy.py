# backend/salonbook/services/cancellation_policy.py
"""
Cancellation Policy for the SalonBook scheduling core.

Customers may cancel their own CONFIRMED bookings up to
``settings.cancellation_cutoff_hours`` before the start. Admins and owners
may cancel any booking of the tenant at any time.

A successful cancellation publishes ``BookingCancelled`` after commit; the
default handler requests a waiting-list notification for the freed slot.
"""

from datetime import datetime
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import (
    CancellationWindowException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, hours_until, utc_now
from ..events import BookingCancelled, EventPublisher, build_default_publisher
from ..models.booking import Booking
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import ActingIdentity
from ..repositories import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class CancellationPolicy(BaseService):
    """Applies the cancellation rules for the acting identity."""

    def __init__(self, db: Session, event_publisher: Optional[EventPublisher] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_booking_repository(db)
        self.event_publisher = event_publisher or build_default_publisher()

    @BaseService.measure_operation("cancel_booking")
    def cancel(
        self,
        tenant_id: str,
        booking_id: str,
        identity: ActingIdentity,
        now: Optional[datetime] = None,
    ) -> Booking:
        """
        Cancel a booking on behalf of ``identity``.

        Args:
            tenant_id: Owning tenant
            booking_id: Booking to cancel
            identity: Customer or admin
            now: Reference time for the cutoff (defaults to current UTC time)

        Returns:
            The booking in its CANCELLED state

        Raises:
            NotFoundException: Booking not in this tenant
            ForbiddenException: Customer cancelling someone else's booking
            ValidationException: Customer cancelling twice
            CancellationWindowException: Customer inside the cutoff window
        """
        reference = ensure_utc(now) if now is not None else utc_now()
        self.log_operation(
            "cancel_booking",
            tenant_id=tenant_id,
            booking_id=booking_id,
            acting_role=identity.role.value,
        )

        with self.repository.transaction():
            booking = self.repository.get_booking_for_update(tenant_id, booking_id)
            if booking is None:
                raise NotFoundException("Booking not found", details={"booking_id": booking_id})

            if not identity.is_admin:
                self._check_customer_rules(booking, identity, reference)
            elif not booking.is_cancellable:
                # CANCELLED is terminal; keep the first cancellation's audit data.
                self.logger.info(f"Booking {booking.id} already cancelled; nothing to do")
                return booking

            booking.cancel(cancelled_by=identity.audit_name, cancelled_at=reference)

        prometheus_metrics.inc_booking_cancelled(identity.role.value)
        self._notify_cancelled(tenant_id, booking)
        return booking

    def _check_customer_rules(
        self, booking: Booking, identity: ActingIdentity, reference: datetime
    ) -> None:
        if not identity.email or identity.email != booking.customer_email.lower():
            raise ForbiddenException(
                "You can only cancel your own bookings",
                code="NOT_BOOKING_OWNER",
                details={"booking_id": booking.id},
            )

        if not booking.is_cancellable:
            raise ValidationException(
                "Booking is already cancelled",
                code="ALREADY_CANCELLED",
                details={"booking_id": booking.id, "status": booking.status},
            )

        cutoff = settings.cancellation_cutoff_hours
        remaining = hours_until(booking.start_at, now=reference)
        if remaining < cutoff:
            raise CancellationWindowException(cutoff_hours=cutoff, hours_until=remaining)

    def _notify_cancelled(self, tenant_id: str, booking: Booking) -> None:
        """Run the post-commit cancellation hooks; failures never undo the cancel."""
        self.event_publisher.publish(
            BookingCancelled(
                tenant_id=tenant_id,
                booking_id=booking.id,
                staff_id=booking.staff_id,
                service_id=booking.service_id,
                start_at=booking.start_at,
                end_at=booking.end_at,
                cancelled_by=booking.cancelled_by,
                cancelled_at=booking.cancelled_at,
            )
        )
