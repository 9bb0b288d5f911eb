# backend/salonbook/models/staff.py
"""
Staff members and their availability inputs.

Architecture: two independent sources restrict when a staff member can be
booked.
- Schedule: weekly recurring working windows (minutes of day per weekday).
  Several windows per weekday are allowed for split shifts.
- TimeOff: full-day unavailability over an inclusive date range, regardless
  of the weekly schedule.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Staff(Base):
    __tablename__ = "staff"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    schedules = relationship(
        "Schedule",
        back_populates="staff",
        cascade="all, delete-orphan",
    )
    time_offs = relationship(
        "TimeOff",
        back_populates="staff",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Staff {self.name} tenant={self.tenant_id}>"


class Schedule(Base):
    """Weekly working window. weekday: 0 = Monday ... 6 = Sunday."""

    __tablename__ = "schedules"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(64), nullable=False)
    staff_id = Column(String(26), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    weekday = Column(Integer, nullable=False)
    start_minute = Column(Integer, nullable=False)
    end_minute = Column(Integer, nullable=False)

    staff = relationship("Staff", back_populates="schedules")

    __table_args__ = (
        CheckConstraint("weekday >= 0 AND weekday <= 6", name="ck_schedules_weekday"),
        CheckConstraint(
            "start_minute >= 0 AND end_minute <= 1440 AND start_minute < end_minute",
            name="ck_schedules_window",
        ),
        Index("ix_schedules_tenant_staff_weekday", "tenant_id", "staff_id", "weekday"),
    )

    def contains(self, start_minute: float, end_minute: float) -> bool:
        """True if [start_minute, end_minute) lies inside this window. Fractions count."""
        return self.start_minute <= start_minute and end_minute <= self.end_minute


class TimeOff(Base):
    """Inclusive date range during which the staff member cannot be booked."""

    __tablename__ = "time_offs"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(64), nullable=False)
    staff_id = Column(String(26), ForeignKey("staff.id", ondelete="CASCADE"), nullable=False)
    date_from = Column(Date, nullable=False)
    date_to = Column(Date, nullable=False)
    reason = Column(Text, nullable=True)

    staff = relationship("Staff", back_populates="time_offs")

    __table_args__ = (
        CheckConstraint("date_from <= date_to", name="ck_time_offs_range"),
        Index("ix_time_offs_tenant_staff_range", "tenant_id", "staff_id", "date_from", "date_to"),
    )
