# backend/salonbook/routes/availability.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..api.dependencies import get_availability_service, get_tenant_id
from ..core.exceptions import DomainException
from ..schemas.availability import AvailabilityResponse, AvailableSlotResponse
from ..services.availability_service import AvailabilityService
from .bookings import handle_domain_exception

router = APIRouter(prefix="/api/availability", tags=["availability"])


@router.get("", response_model=AvailabilityResponse)
def get_availability(
    service_id: str = Query(..., alias="serviceId", min_length=1),
    target_date: date = Query(..., alias="date", description="Business-local date (YYYY-MM-DD)"),
    staff_id: Optional[str] = Query(None, alias="staffId"),
    tenant_id: str = Depends(get_tenant_id),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    """Free start times for a service on a date, across staff or for one staff member."""
    try:
        slots = availability_service.get_available_slots(
            tenant_id, service_id, target_date, staff_id=staff_id
        )
        return AvailabilityResponse(
            service_id=service_id,
            date=target_date,
            staff_id=staff_id,
            slots=[AvailableSlotResponse.model_validate(slot) for slot in slots],
        )
    except DomainException as e:
        handle_domain_exception(e)
