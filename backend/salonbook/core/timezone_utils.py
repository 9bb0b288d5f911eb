# backend/salonbook/core/timezone_utils.py
"""
Timezone utilities for the scheduling core.

Bookings are stored in UTC. Weekday, calendar date and minute-of-day are
always derived in the business timezone so that schedules and time-off
(which are wall-clock concepts) line up with what staff see.
"""

from datetime import date, datetime, timezone
from typing import Optional

import pytz

from .config import settings


def get_business_timezone(tz_name: Optional[str] = None) -> pytz.BaseTzInfo:
    """Return the configured business timezone as a pytz object."""
    return pytz.timezone(tz_name or settings.business_timezone)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive values are interpreted as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_business_time(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """Convert a datetime to the business timezone."""
    return ensure_utc(dt).astimezone(get_business_timezone(tz_name))


def business_date(dt: datetime, tz_name: Optional[str] = None) -> date:
    """Calendar date of ``dt`` in the business timezone."""
    return to_business_time(dt, tz_name).date()


def minute_of_day(dt: datetime, tz_name: Optional[str] = None) -> float:
    """
    Minutes since local midnight in the business timezone.

    Seconds and microseconds are kept as a fraction so that a start like
    16:15:30 is not treated as 16:15 when compared against a closing time.
    """
    local = to_business_time(dt, tz_name)
    seconds = local.second + local.microsecond / 1_000_000
    return local.hour * 60 + local.minute + seconds / 60


def local_midnight_utc(target_date: date, tz_name: Optional[str] = None) -> datetime:
    """UTC instant of local midnight that starts ``target_date``."""
    tz = get_business_timezone(tz_name)
    local_midnight = tz.localize(datetime(target_date.year, target_date.month, target_date.day))
    return local_midnight.astimezone(timezone.utc)


def hours_until(dt: datetime, now: Optional[datetime] = None) -> float:
    """Hours from ``now`` (default: current UTC time) until ``dt``."""
    reference = ensure_utc(now) if now is not None else utc_now()
    return (ensure_utc(dt) - reference).total_seconds() / 3600


def local_minute_to_utc(target_date: date, minute: int, tz_name: Optional[str] = None) -> datetime:
    """UTC instant of ``minute`` minutes past local midnight on ``target_date``."""
    tz = get_business_timezone(tz_name)
    hour, minute_of_hour = divmod(minute, 60)
    local_dt = tz.localize(
        datetime(target_date.year, target_date.month, target_date.day, hour, minute_of_hour)
    )
    return local_dt.astimezone(timezone.utc)
