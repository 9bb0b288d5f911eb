"""Acting identity abstractions for booking and cancellation policies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .core.enums import RoleName


@dataclass(frozen=True)
class CustomerIdentity:
    """A customer acting on their own bookings.

    ``email`` is None for anonymous callers; they may still book with an
    explicit customer email but cannot cancel anything.
    """

    email: Optional[str] = None

    @property
    def role(self) -> RoleName:
        return RoleName.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return False

    @property
    def audit_name(self) -> str:
        return self.email or "system"


@dataclass(frozen=True)
class AdminIdentity:
    """Salon staff with the tenant-wide override."""

    email: Optional[str] = None
    role: RoleName = RoleName.ADMIN

    def __post_init__(self) -> None:
        if not RoleName(self.role).is_admin:
            raise ValueError(f"AdminIdentity requires an admin role, got {self.role!r}")

    @property
    def is_admin(self) -> bool:
        return True

    @property
    def audit_name(self) -> str:
        return self.email or "admin"


ActingIdentity = Union[CustomerIdentity, AdminIdentity]


def identity_from_role(role: Optional[str], email: Optional[str]) -> ActingIdentity:
    """
    Build the acting identity from a role name and optional email.

    Unknown or missing roles act as customers.
    """
    normalized_email = email.strip().lower() if email and email.strip() else None
    try:
        role_name = RoleName((role or "").strip().lower())
    except ValueError:
        role_name = RoleName.CUSTOMER

    if role_name.is_admin:
        return AdminIdentity(email=normalized_email, role=role_name)
    return CustomerIdentity(email=normalized_email)
