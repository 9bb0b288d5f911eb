# backend/salonbook/routes/admin_schedule.py
"""
Admin routes for working hours, time off and the customer ban list.
"""

import logging
from typing import List

from fastapi import APIRouter, Body, Depends, Path, Response, status

from ..api.dependencies import get_schedule_service, get_tenant_id, require_admin
from ..core.exceptions import DomainException
from ..principal import AdminIdentity
from ..schemas.schedule import (
    CustomerBanCreate,
    CustomerBanResponse,
    ScheduleCreate,
    ScheduleResponse,
    TimeOffCreate,
    TimeOffResponse,
)
from ..services.schedule_service import ScheduleService
from .bookings import handle_domain_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin-schedule"], dependencies=[Depends(require_admin)])


# Schedules


@router.get("/staff/{staff_id}/schedules", response_model=List[ScheduleResponse])
def list_schedules(
    staff_id: str = Path(..., min_length=1),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> List[ScheduleResponse]:
    try:
        schedules = schedule_service.list_schedules(tenant_id, staff_id)
        return [ScheduleResponse.model_validate(schedule) for schedule in schedules]
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/staff/{staff_id}/schedules",
    response_model=ScheduleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Overlaps another window on that weekday"}},
)
def add_schedule(
    staff_id: str = Path(..., min_length=1),
    payload: ScheduleCreate = Body(...),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleResponse:
    try:
        schedule = schedule_service.add_schedule(
            tenant_id, staff_id, payload.weekday, payload.start_minute, payload.end_minute
        )
        return ScheduleResponse.model_validate(schedule)
    except DomainException as e:
        handle_domain_exception(e)


@router.put(
    "/staff/{staff_id}/schedules/{schedule_id}",
    response_model=ScheduleResponse,
    responses={409: {"description": "Overlaps another window on that weekday"}},
)
def update_schedule(
    staff_id: str = Path(..., min_length=1),
    schedule_id: str = Path(..., min_length=1),
    payload: ScheduleCreate = Body(...),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleResponse:
    try:
        schedule = schedule_service.update_schedule(
            tenant_id,
            staff_id,
            schedule_id,
            payload.weekday,
            payload.start_minute,
            payload.end_minute,
        )
        return ScheduleResponse.model_validate(schedule)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/staff/{staff_id}/schedules/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(
    staff_id: str = Path(..., min_length=1),
    schedule_id: str = Path(..., min_length=1),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> Response:
    try:
        schedule_service.delete_schedule(tenant_id, staff_id, schedule_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)


# Time off


@router.get("/staff/{staff_id}/timeoff", response_model=List[TimeOffResponse])
def list_time_off(
    staff_id: str = Path(..., min_length=1),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> List[TimeOffResponse]:
    try:
        time_offs = schedule_service.list_time_off(tenant_id, staff_id)
        return [TimeOffResponse.model_validate(time_off) for time_off in time_offs]
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/staff/{staff_id}/timeoff",
    response_model=TimeOffResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_time_off(
    staff_id: str = Path(..., min_length=1),
    payload: TimeOffCreate = Body(...),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> TimeOffResponse:
    try:
        time_off = schedule_service.add_time_off(
            tenant_id, staff_id, payload.date_from, payload.date_to, payload.reason
        )
        return TimeOffResponse.model_validate(time_off)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/staff/{staff_id}/timeoff/{time_off_id}", response_model=TimeOffResponse)
def update_time_off(
    staff_id: str = Path(..., min_length=1),
    time_off_id: str = Path(..., min_length=1),
    payload: TimeOffCreate = Body(...),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> TimeOffResponse:
    try:
        time_off = schedule_service.update_time_off(
            tenant_id, staff_id, time_off_id, payload.date_from, payload.date_to, payload.reason
        )
        return TimeOffResponse.model_validate(time_off)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/staff/{staff_id}/timeoff/{time_off_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_time_off(
    staff_id: str = Path(..., min_length=1),
    time_off_id: str = Path(..., min_length=1),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> Response:
    try:
        schedule_service.delete_time_off(tenant_id, staff_id, time_off_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)


# Customer bans


@router.get("/customers/ban", response_model=List[CustomerBanResponse])
def list_bans(
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> List[CustomerBanResponse]:
    try:
        return [CustomerBanResponse.model_validate(ban) for ban in schedule_service.list_bans(tenant_id)]
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/customers/ban", response_model=CustomerBanResponse, status_code=status.HTTP_201_CREATED)
def ban_customer(
    payload: CustomerBanCreate = Body(...),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> CustomerBanResponse:
    try:
        ban = schedule_service.ban_customer(tenant_id, payload.email, payload.reason)
        return CustomerBanResponse.model_validate(ban)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/customers/ban/{email}", status_code=status.HTTP_204_NO_CONTENT)
def unban_customer(
    email: str = Path(..., min_length=3),
    tenant_id: str = Depends(get_tenant_id),
    schedule_service: ScheduleService = Depends(get_schedule_service),
) -> Response:
    try:
        schedule_service.unban_customer(tenant_id, email)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        handle_domain_exception(e)
