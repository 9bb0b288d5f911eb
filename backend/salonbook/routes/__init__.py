# backend/salonbook/routes/__init__.py
from . import (
    admin_bookings as admin_bookings,
    admin_schedule as admin_schedule,
    availability as availability,
    bookings as bookings,
    health as health,
)
