# backend/salonbook/schemas/schedule.py
"""Schemas for working hours, time off and customer bans."""

from datetime import date, datetime
from typing import Optional

from pydantic import AliasChoices, EmailStr, Field, model_validator

from ._strict_base import StrictModel, StrictRequestModel


class ScheduleCreate(StrictRequestModel):
    """Weekly window; weekday 0 = Monday, minutes of day 0-1440."""

    weekday: int = Field(..., ge=0, le=6)
    start_minute: int = Field(
        ..., ge=0, le=1440, validation_alias=AliasChoices("start_minute", "startMinute")
    )
    end_minute: int = Field(
        ..., ge=0, le=1440, validation_alias=AliasChoices("end_minute", "endMinute")
    )


class ScheduleResponse(StrictModel):
    id: str
    staff_id: str
    weekday: int
    start_minute: int
    end_minute: int


class TimeOffCreate(StrictRequestModel):
    date_from: date = Field(..., validation_alias=AliasChoices("date_from", "dateFrom"))
    date_to: date = Field(..., validation_alias=AliasChoices("date_to", "dateTo"))
    reason: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def _check_range(self) -> "TimeOffCreate":
        if self.date_from > self.date_to:
            raise ValueError("date_from must be on or before date_to")
        return self


class TimeOffResponse(StrictModel):
    id: str
    staff_id: str
    date_from: date
    date_to: date
    reason: Optional[str] = None


class CustomerBanCreate(StrictRequestModel):
    email: EmailStr
    reason: Optional[str] = Field(None, max_length=500)


class CustomerBanResponse(StrictModel):
    id: str
    email: str
    reason: Optional[str] = None
    created_at: datetime
