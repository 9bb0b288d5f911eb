from datetime import date, datetime
from typing import List, Optional

from ._strict_base import StrictModel


class AvailableSlotResponse(StrictModel):
    staff_id: str
    staff_name: str
    start_at: datetime
    end_at: datetime


class AvailabilityResponse(StrictModel):
    service_id: str
    date: date
    staff_id: Optional[str] = None
    slots: List[AvailableSlotResponse]
