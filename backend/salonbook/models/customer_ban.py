# backend/salonbook/models/customer_ban.py
from sqlalchemy import Column, String, Text, UniqueConstraint

from ..core.timezone_utils import utc_now
from ..core.ulid_helper import generate_ulid
from ..database import Base
from .types import UTCDateTime


class CustomerBan(Base):
    """A matching row blocks self-service bookings for that email in the tenant."""

    __tablename__ = "customer_bans"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tenant_id = Column(String(64), nullable=False)
    email = Column(String(320), nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(UTCDateTime(), nullable=False, default=utc_now)

    __table_args__ = (UniqueConstraint("tenant_id", "email", name="uq_customer_bans_tenant_email"),)
