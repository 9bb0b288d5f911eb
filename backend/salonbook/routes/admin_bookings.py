# backend/salonbook/routes/admin_bookings.py
"""
Admin booking routes (admin/owner only).

- GET    /api/admin/bookings       filtered, paginated listing
- POST   /api/admin/bookings       booking on behalf of a customer
- DELETE /api/admin/bookings/{id}  cancel without customer restrictions
"""

from datetime import datetime
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query, Response, status

from ..api.dependencies import (
    get_booking_service,
    get_cancellation_policy,
    get_tenant_id,
    require_admin,
)
from ..core.exceptions import DomainException
from ..models.booking import BookingStatus
from ..principal import AdminIdentity
from ..repositories import BookingFilters
from ..schemas.base_responses import PaginationInfo
from ..schemas.booking import BookingCreate, BookingListResponse, BookingResponse
from ..services.booking_service import BookingRequest, BookingService
from ..services.cancellation_policy import CancellationPolicy
from .bookings import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/bookings", tags=["admin-bookings"])


@router.get("", response_model=BookingListResponse)
def list_bookings(
    date_from: Optional[datetime] = Query(None, alias="from", description="Earliest start (inclusive)"),
    date_to: Optional[datetime] = Query(None, alias="to", description="Latest start (inclusive)"),
    staff_id: Optional[str] = Query(None, alias="staffId"),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    tenant_id: str = Depends(get_tenant_id),
    admin: AdminIdentity = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    """All bookings of the tenant, ordered by start."""
    try:
        result = booking_service.list_bookings(
            tenant_id,
            BookingFilters(
                date_from=date_from,
                date_to=date_to,
                staff_id=staff_id,
                status=booking_status,
            ),
            page=page,
            limit=limit,
        )
        return BookingListResponse(
            bookings=[BookingResponse.model_validate(booking) for booking in result.bookings],
            pagination=PaginationInfo(**result.pagination.to_dict()),
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Service or staff not found"},
        409: {"description": "Time slot not available or staff on time off"},
    },
)
def create_booking_for_customer(
    booking_data: BookingCreate = Body(...),
    tenant_id: str = Depends(get_tenant_id),
    admin: AdminIdentity = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Book on behalf of a customer.

    Skips the ban list, the active flags and working hours. Overlap and time
    off still apply.
    """
    try:
        booking = booking_service.create_booking(
            tenant_id,
            BookingRequest(
                service_id=booking_data.service_id,
                staff_id=booking_data.staff_id,
                customer_email=booking_data.customer_email,
                start_at=booking_data.start_at,
            ),
            admin,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_booking(
    booking_id: str = Path(..., min_length=1),
    tenant_id: str = Depends(get_tenant_id),
    admin: AdminIdentity = Depends(require_admin),
    cancellation_policy: CancellationPolicy = Depends(get_cancellation_policy),
) -> Response:
    try:
        cancellation_policy.cancel(tenant_id, booking_id, admin)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)
