"""Shared column types."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from ..core.timezone_utils import ensure_utc


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime stored as UTC.

    SQLite drops tzinfo on the way in, so values are normalized to UTC before
    binding and UTC is re-attached on load. Naive input is treated as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        if value is None:
            return None
        utc_value = ensure_utc(value)
        if dialect.name == "sqlite":
            return utc_value.replace(tzinfo=None)
        return utc_value

    def process_result_value(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        if value is None:
            return None
        return ensure_utc(value)
