# backend/salonbook/models/service.py
"""
Bookable salon service (e.g. "Haircut", 45 minutes).

The duration drives a booking's end time at creation. Editing the duration
later never touches existing bookings; they keep the end time they were
written with.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Integer, Numeric, String

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(64), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_services_duration_positive"),
        Index("ix_services_tenant_active", "tenant_id", "active"),
    )

    def __repr__(self) -> str:
        return f"<Service {self.name} ({self.duration_minutes}min) tenant={self.tenant_id}>"
