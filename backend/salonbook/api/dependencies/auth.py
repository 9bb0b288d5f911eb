# backend/salonbook/api/dependencies/auth.py
"""
Tenant and acting-identity dependencies.

Authentication happens upstream; the gateway forwards the result as trusted
headers:

- ``x-tenant-id``: tenant every request operates in (required)
- ``x-user-role``: ``customer`` | ``admin`` | ``owner``
- ``x-user-email``: email of the acting person
"""

import logging
from typing import Optional

from fastapi import Depends, Header

from ...core.exceptions import ForbiddenException, UnauthorizedException, ValidationException
from ...principal import ActingIdentity, AdminIdentity, CustomerIdentity, identity_from_role

logger = logging.getLogger(__name__)


def get_tenant_id(x_tenant_id: Optional[str] = Header(default=None)) -> str:
    """Tenant id from ``x-tenant-id``; missing or blank is a 400."""
    tenant_id = (x_tenant_id or "").strip()
    if not tenant_id:
        raise ValidationException("Missing x-tenant-id header", code="TENANT_REQUIRED")
    return tenant_id


def get_optional_identity(
    x_user_role: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
) -> Optional[ActingIdentity]:
    """Acting identity, or None when neither identity header is present."""
    if not (x_user_role or "").strip() and not (x_user_email or "").strip():
        return None
    return identity_from_role(x_user_role, x_user_email)


def get_acting_identity(
    identity: Optional[ActingIdentity] = Depends(get_optional_identity),
) -> ActingIdentity:
    """Acting identity; anonymous callers act as customers without an email."""
    return identity or CustomerIdentity()


def require_customer_email(
    identity: Optional[ActingIdentity] = Depends(get_optional_identity),
) -> CustomerIdentity:
    """A signed-in customer (an email is needed to find their bookings)."""
    if identity is None or not identity.email:
        raise UnauthorizedException("Authentication required", code="AUTH_REQUIRED")
    if identity.is_admin:
        return CustomerIdentity(email=identity.email)
    return identity


def require_admin(
    identity: Optional[ActingIdentity] = Depends(get_optional_identity),
) -> AdminIdentity:
    """Admin or owner; 401 without identity, 403 for customers."""
    if identity is None:
        raise UnauthorizedException("Authentication required", code="AUTH_REQUIRED")
    if not isinstance(identity, AdminIdentity):
        logger.warning("Customer %s attempted an admin operation", identity.email)
        raise ForbiddenException("Admin access required", code="ADMIN_REQUIRED")
    return identity
