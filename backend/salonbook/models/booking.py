# backend/salonbook/models/booking.py
"""
Booking model for the SalonBook scheduling core.

Bookings are confirmed instantly and store their own interval. end_at is
computed from the service duration when the row is written and is never
recomputed, so later service edits do not move existing appointments.

Lifecycle: CONFIRMED -> CANCELLED, never reversed and never deleted.

Double-booking guards at the database level:
- ``uq_bookings_staff_confirmed_start``: partial unique index on
  (tenant_id, staff_id, start_at) for CONFIRMED rows (PostgreSQL and SQLite).
- ``bookings_no_overlap_per_staff``: PostgreSQL exclusion constraint over the
  half-open ``[start_at, end_at)`` range for CONFIRMED rows. On SQLite a
  BEFORE INSERT trigger raises with the same name.
"""

from datetime import datetime
from enum import Enum
import logging
from typing import Optional

from sqlalchemy import (
    DDL,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    String,
    event,
    text,
)
from sqlalchemy.orm import relationship

from ..core.timezone_utils import utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime

logger = logging.getLogger(__name__)

NO_OVERLAP_CONSTRAINT = "bookings_no_overlap_per_staff"
UNIQUE_START_INDEX = "uq_bookings_staff_confirmed_start"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    CONFIRMED = "CONFIRMED"  # Default - instant booking
    CANCELLED = "CANCELLED"  # Terminal


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    tenant_id = Column(String(64), nullable=False)
    service_id = Column(String(26), ForeignKey("services.id"), nullable=False)
    staff_id = Column(String(26), ForeignKey("staff.id"), nullable=False)
    customer_email = Column(String(320), nullable=False, index=True)

    start_at = Column(UTCDateTime(), nullable=False)
    end_at = Column(UTCDateTime(), nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value, index=True)
    created_by = Column(String(320), nullable=True)
    cancelled_by = Column(String(320), nullable=True)

    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)
    cancelled_at = Column(UTCDateTime(), nullable=True)

    service = relationship("Service")
    staff = relationship("Staff")

    __table_args__ = (
        CheckConstraint("end_at > start_at", name="ck_bookings_interval"),
        CheckConstraint(
            "status IN ('CONFIRMED', 'CANCELLED')", name="ck_bookings_status"
        ),
        Index("ix_bookings_tenant_staff_start", "tenant_id", "staff_id", "start_at"),
        Index(
            UNIQUE_START_INDEX,
            "tenant_id",
            "staff_id",
            "start_at",
            unique=True,
            postgresql_where=text("status = 'CONFIRMED'"),
            sqlite_where=text("status = 'CONFIRMED'"),
        ),
    )

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED

    @property
    def is_cancellable(self) -> bool:
        return self.is_confirmed

    def overlaps(self, start_at: datetime, end_at: datetime) -> bool:
        """Half-open overlap test: touching endpoints do not overlap."""
        return self.start_at < end_at and self.end_at > start_at

    def cancel(self, cancelled_by: str, cancelled_at: Optional[datetime] = None) -> None:
        """Move to the terminal CANCELLED state."""
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_by = cancelled_by
        self.cancelled_at = cancelled_at or utc_now()

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id} staff={self.staff_id} "
            f"{self.start_at}-{self.end_at} {self.status}>"
        )


# PostgreSQL only: btree_gist lets the scalar equality columns join the range
# in one GiST exclusion constraint.
event.listen(
    Booking.__table__,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE bookings ADD CONSTRAINT {NO_OVERLAP_CONSTRAINT} "
        "EXCLUDE USING gist ("
        "tenant_id WITH =, staff_id WITH =, "
        "tstzrange(start_at, end_at, '[)') WITH &&"
        ") WHERE (status = 'CONFIRMED')"
    ).execute_if(dialect="postgresql"),
)

# SQLite has no exclusion constraints; a trigger rejects the same overlaps and
# raises with the constraint name so conflict mapping treats both dialects alike.
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        f"CREATE TRIGGER IF NOT EXISTS trg_{NO_OVERLAP_CONSTRAINT} "
        "BEFORE INSERT ON bookings "
        "FOR EACH ROW WHEN NEW.status = 'CONFIRMED' "
        "BEGIN "
        f"SELECT RAISE(ABORT, '{NO_OVERLAP_CONSTRAINT}') "
        "WHERE EXISTS ("
        "SELECT 1 FROM bookings "
        "WHERE tenant_id = NEW.tenant_id AND staff_id = NEW.staff_id "
        "AND status = 'CONFIRMED' "
        "AND start_at < NEW.end_at AND end_at > NEW.start_at"
        "); "
        "END"
    ).execute_if(dialect="sqlite"),
)
