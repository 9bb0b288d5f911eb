# backend/salonbook/core/enums.py
"""
Core enums for the SalonBook scheduling core.
"""

from enum import Enum


class RoleName(str, Enum):
    """
    Roles an acting identity can carry.

    Owners and admins share the tenant-wide override; customers act on their
    own bookings only.
    """

    CUSTOMER = "customer"
    ADMIN = "admin"
    OWNER = "owner"

    @property
    def is_admin(self) -> bool:
        return self in (RoleName.ADMIN, RoleName.OWNER)
