# backend/salonbook/routes/bookings.py
"""
Customer booking routes.

- POST   /api/bookings        instant booking (self-service)
- GET    /api/bookings/me     upcoming bookings of the signed-in customer
- DELETE /api/bookings/{id}   cancel (customer rules, or admin override)
"""

import logging
from typing import List, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Response, status

from ..api.dependencies import (
    get_acting_identity,
    get_booking_service,
    get_cancellation_policy,
    get_tenant_id,
    require_customer_email,
)
from ..core.exceptions import DomainException
from ..principal import ActingIdentity, CustomerIdentity
from ..schemas.booking import BookingCreate, BookingResponse
from ..services.booking_service import BookingRequest, BookingService
from ..services.cancellation_policy import CancellationPolicy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        403: {"description": "Customer is banned"},
        404: {"description": "Service or staff not found"},
        409: {"description": "Time slot not available"},
    },
)
def create_booking(
    booking_data: BookingCreate = Body(...),
    tenant_id: str = Depends(get_tenant_id),
    identity: ActingIdentity = Depends(get_acting_identity),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Create an instant booking.

    Always runs the customer policy (ban list, active flags, working hours),
    even for admin callers; admins book through /api/admin/bookings.
    """
    customer = identity if not identity.is_admin else CustomerIdentity(email=identity.email)
    try:
        booking = booking_service.create_booking(
            tenant_id,
            BookingRequest(
                service_id=booking_data.service_id,
                staff_id=booking_data.staff_id,
                customer_email=booking_data.customer_email,
                start_at=booking_data.start_at,
            ),
            customer,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/me", response_model=List[BookingResponse])
def list_my_bookings(
    tenant_id: str = Depends(get_tenant_id),
    customer: CustomerIdentity = Depends(require_customer_email),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    """Future CONFIRMED bookings of the caller, soonest first."""
    try:
        bookings = booking_service.list_my_bookings(tenant_id, customer.email or "")
        return [BookingResponse.model_validate(booking) for booking in bookings]
    except DomainException as e:
        handle_domain_exception(e)


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "Already cancelled or too late to cancel"},
        403: {"description": "Not the booking owner"},
        404: {"description": "Booking not found"},
    },
)
def cancel_booking(
    booking_id: str = Path(..., min_length=1, description="Booking ULID"),
    tenant_id: str = Depends(get_tenant_id),
    identity: ActingIdentity = Depends(get_acting_identity),
    cancellation_policy: CancellationPolicy = Depends(get_cancellation_policy),
) -> Response:
    """Cancel a booking. Admin identities bypass the customer rules."""
    try:
        cancellation_policy.cancel(tenant_id, booking_id, identity)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)
