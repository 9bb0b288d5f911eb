from __future__ import annotations

from datetime import date, timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from salonbook.core.config import settings
from salonbook.core.exceptions import (
    BookingConflictException,
    CustomerBannedException,
    NotFoundException,
    StaffUnavailableException,
)
from salonbook.models import BookingStatus
from salonbook.principal import AdminIdentity, CustomerIdentity
from salonbook.services.availability_service import AvailabilityService
from tests.factories.salon_builders import (
    MONDAY,
    OTHER_TENANT,
    TENANT,
    at,
    make_ban,
    make_booking,
    make_schedule,
    make_service,
    make_staff,
    make_time_off,
)

CUSTOMER = CustomerIdentity(email="anna@example.com")
ADMIN = AdminIdentity(email="boss@salon.example")


@pytest.fixture
def resolver(db: Session) -> AvailabilityService:
    return AvailabilityService(db)


def _check(resolver, salon, start_at, identity=CUSTOMER, email="anna@example.com"):
    return resolver.check_availability(
        salon.tenant_id, salon.maria.id, salon.haircut.id, start_at, email, identity
    )


class TestHaircutScenario:
    """Maria works Mondays 09:00-17:00 and is booked 10:00-10:45."""

    @pytest.fixture(autouse=True)
    def _existing_booking(self, db: Session, salon: SimpleNamespace) -> None:
        self.existing = make_booking(db, salon.haircut, salon.maria, at(MONDAY, 10))

    def test_overlapping_start_conflicts(self, resolver, salon) -> None:
        with pytest.raises(BookingConflictException) as exc_info:
            _check(resolver, salon, at(MONDAY, 10, 30))
        assert exc_info.value.details["conflicting_booking_ids"] == [self.existing.id]

    def test_adjacent_start_is_available(self, resolver, salon) -> None:
        result = _check(resolver, salon, at(MONDAY, 10, 45))
        assert result.start_at == at(MONDAY, 10, 45)
        assert result.end_at == at(MONDAY, 11, 30)

    def test_booking_ending_at_existing_start_is_available(self, resolver, salon) -> None:
        result = _check(resolver, salon, at(MONDAY, 9, 15))
        assert result.end_at == at(MONDAY, 10)

    def test_cancelled_booking_does_not_block(self, db, resolver, salon) -> None:
        self.existing.cancel("anna@example.com")
        db.commit()
        assert _check(resolver, salon, at(MONDAY, 10, 30)).start_at == at(MONDAY, 10, 30)

    def test_admin_is_also_blocked_by_overlap(self, resolver, salon) -> None:
        with pytest.raises(BookingConflictException):
            _check(resolver, salon, at(MONDAY, 10, 15), identity=ADMIN)

    def test_day_off_conflicts_regardless_of_hour(self, db, resolver, salon) -> None:
        make_time_off(db, salon.maria, MONDAY, MONDAY)
        with pytest.raises(StaffUnavailableException):
            _check(resolver, salon, at(MONDAY, 14))


class TestTimeOff:
    @pytest.fixture(autouse=True)
    def _vacation(self, db: Session, salon: SimpleNamespace) -> None:
        self.time_off = make_time_off(db, salon.maria, date(2024, 3, 1), date(2024, 3, 3))

    @pytest.mark.parametrize(
        "day, hour",
        [(date(2024, 3, 1), 0), (date(2024, 3, 2), 12), (date(2024, 3, 3), 23)],
    )
    def test_every_day_in_range_is_blocked(self, resolver, salon, day, hour) -> None:
        with pytest.raises(StaffUnavailableException) as exc_info:
            _check(resolver, salon, at(day, hour))
        assert exc_info.value.details["time_off_id"] == self.time_off.id

    def test_admin_cannot_book_over_time_off(self, resolver, salon) -> None:
        with pytest.raises(StaffUnavailableException):
            _check(resolver, salon, at(date(2024, 3, 2), 10), identity=ADMIN)

    def test_day_after_range_is_not_blocked_for_admin(self, resolver, salon) -> None:
        # 2024-03-04 is a Monday inside Maria's working hours
        result = _check(resolver, salon, at(date(2024, 3, 4), 10), identity=ADMIN)
        assert result.start_at == at(date(2024, 3, 4), 10)

    def test_business_timezone_decides_the_date(self, monkeypatch, resolver, salon) -> None:
        monkeypatch.setattr(settings, "business_timezone", "America/New_York")
        # 2024-03-04 01:00 UTC is still 2024-03-03 in New York
        with pytest.raises(StaffUnavailableException):
            _check(resolver, salon, at(date(2024, 3, 4), 1), identity=ADMIN)


class TestResolutionOrder:
    def test_unknown_service(self, resolver, salon) -> None:
        with pytest.raises(NotFoundException) as exc_info:
            resolver.check_availability(
                TENANT, salon.maria.id, "missing", at(MONDAY, 10), "anna@example.com", CUSTOMER
            )
        assert exc_info.value.details == {"service_id": "missing"}

    def test_unknown_staff(self, resolver, salon) -> None:
        with pytest.raises(NotFoundException) as exc_info:
            resolver.check_availability(
                TENANT, "missing", salon.haircut.id, at(MONDAY, 10), "anna@example.com", CUSTOMER
            )
        assert exc_info.value.details == {"staff_id": "missing"}

    def test_inactive_service_hidden_from_customers_only(self, db, resolver, salon) -> None:
        retired = make_service(db, name="Perm", duration_minutes=90, active=False)
        with pytest.raises(NotFoundException):
            resolver.check_availability(
                TENANT, salon.maria.id, retired.id, at(MONDAY, 10), "anna@example.com", CUSTOMER
            )
        result = resolver.check_availability(
            TENANT, salon.maria.id, retired.id, at(MONDAY, 10), "anna@example.com", ADMIN
        )
        assert result.end_at == at(MONDAY, 11, 30)

    def test_inactive_staff_hidden_from_customers_only(self, db, resolver, salon) -> None:
        former = make_staff(db, name="Jonas", active=False)
        with pytest.raises(NotFoundException):
            resolver.check_availability(
                TENANT, former.id, salon.haircut.id, at(MONDAY, 10), "anna@example.com", CUSTOMER
            )
        assert resolver.check_availability(
            TENANT, former.id, salon.haircut.id, at(MONDAY, 10), "anna@example.com", ADMIN
        )

    def test_other_tenant_rows_are_invisible(self, resolver, salon) -> None:
        with pytest.raises(NotFoundException):
            resolver.check_availability(
                OTHER_TENANT,
                salon.maria.id,
                salon.haircut.id,
                at(MONDAY, 10),
                "anna@example.com",
                ADMIN,
            )

    def test_banned_customer_is_forbidden(self, db, resolver, salon) -> None:
        make_ban(db, "mallory@example.com")
        with pytest.raises(CustomerBannedException):
            _check(resolver, salon, at(MONDAY, 10), email="mallory@example.com")

    def test_ban_check_ignores_case(self, db, resolver, salon) -> None:
        make_ban(db, "mallory@example.com")
        with pytest.raises(CustomerBannedException):
            _check(resolver, salon, at(MONDAY, 10), email="Mallory@Example.com")

    def test_admin_ignores_ban(self, db, resolver, salon) -> None:
        make_ban(db, "mallory@example.com")
        assert _check(resolver, salon, at(MONDAY, 10), identity=ADMIN, email="mallory@example.com")

    def test_ban_in_other_tenant_does_not_apply(self, db, resolver, salon) -> None:
        make_ban(db, "mallory@example.com", tenant_id=OTHER_TENANT)
        assert _check(resolver, salon, at(MONDAY, 10), email="mallory@example.com")

    def test_ban_is_checked_before_overlap(self, db, resolver, salon) -> None:
        make_booking(db, salon.haircut, salon.maria, at(MONDAY, 10))
        make_ban(db, "mallory@example.com")
        with pytest.raises(CustomerBannedException):
            _check(resolver, salon, at(MONDAY, 10), email="mallory@example.com")

    def test_other_tenant_booking_does_not_conflict(self, db, resolver, salon) -> None:
        make_booking(db, salon.haircut, salon.maria, at(MONDAY, 10), tenant_id=OTHER_TENANT)
        assert _check(resolver, salon, at(MONDAY, 10))


class TestWorkingHours:
    def test_customer_outside_hours_is_unavailable(self, resolver, salon) -> None:
        with pytest.raises(StaffUnavailableException) as exc_info:
            _check(resolver, salon, at(MONDAY, 16, 30))
        assert exc_info.value.details["end_minute"] == 17 * 60 + 15

    def test_customer_on_non_working_day_is_unavailable(self, resolver, salon) -> None:
        with pytest.raises(StaffUnavailableException):
            _check(resolver, salon, at(MONDAY + timedelta(days=1), 10))

    def test_last_slot_ending_at_close_fits(self, resolver, salon) -> None:
        assert _check(resolver, salon, at(MONDAY, 16, 15)).end_at == at(MONDAY, 17)

    def test_seconds_past_last_slot_run_past_close(self, resolver, salon) -> None:
        with pytest.raises(StaffUnavailableException) as exc_info:
            _check(resolver, salon, at(MONDAY, 16, 15) + timedelta(seconds=30))
        assert exc_info.value.details["end_minute"] == 17 * 60 + 0.5

    def test_admin_may_book_outside_hours(self, resolver, salon) -> None:
        assert _check(resolver, salon, at(MONDAY, 18), identity=ADMIN).end_at == at(MONDAY, 18, 45)

    def test_split_shift_gap_is_unavailable(self, db, resolver) -> None:
        haircut = make_service(db)
        lena = make_staff(db, name="Lena", start_minute=9 * 60, end_minute=12 * 60)
        make_schedule(db, lena, 0, 13 * 60, 17 * 60)
        with pytest.raises(StaffUnavailableException):
            resolver.check_availability(
                TENANT, lena.id, haircut.id, at(MONDAY, 11, 30), "anna@example.com", CUSTOMER
            )
        assert resolver.check_availability(
            TENANT, lena.id, haircut.id, at(MONDAY, 13), "anna@example.com", CUSTOMER
        )


class TestAvailableSlots:
    def test_free_day_uses_grid(self, resolver, salon) -> None:
        slots = resolver.get_available_slots(TENANT, salon.haircut.id, MONDAY)
        # 09:00 .. 16:15 on a 15-minute grid
        assert len(slots) == 30
        assert slots[0].start_at == at(MONDAY, 9)
        assert slots[-1].start_at == at(MONDAY, 16, 15)
        assert slots[-1].end_at == at(MONDAY, 17)

    def test_booked_interval_is_removed(self, db, resolver, salon) -> None:
        make_booking(db, salon.haircut, salon.maria, at(MONDAY, 10))
        starts = {slot.start_at for slot in resolver.get_available_slots(TENANT, salon.haircut.id, MONDAY)}
        assert at(MONDAY, 9, 15) in starts
        assert at(MONDAY, 9, 30) not in starts
        assert at(MONDAY, 10, 30) not in starts
        assert at(MONDAY, 10, 45) in starts

    def test_cancelled_booking_frees_slots(self, db, resolver, salon) -> None:
        make_booking(
            db, salon.haircut, salon.maria, at(MONDAY, 10), status=BookingStatus.CANCELLED
        )
        starts = {slot.start_at for slot in resolver.get_available_slots(TENANT, salon.haircut.id, MONDAY)}
        assert at(MONDAY, 10) in starts

    def test_time_off_removes_staff(self, db, resolver, salon) -> None:
        make_time_off(db, salon.maria, MONDAY, MONDAY)
        assert resolver.get_available_slots(TENANT, salon.haircut.id, MONDAY) == []

    def test_non_working_day_is_empty(self, resolver, salon) -> None:
        assert resolver.get_available_slots(TENANT, salon.haircut.id, MONDAY + timedelta(days=2)) == []

    def test_slots_sorted_across_staff(self, db, resolver, salon) -> None:
        make_staff(db, name="Ada", start_minute=9 * 60, end_minute=10 * 60)
        slots = resolver.get_available_slots(TENANT, salon.haircut.id, MONDAY)
        first_two = [(slot.start_at, slot.staff_name) for slot in slots[:2]]
        assert first_two == [(at(MONDAY, 9), "Ada"), (at(MONDAY, 9), "Maria")]

    def test_filter_by_staff(self, db, resolver, salon) -> None:
        make_staff(db, name="Ada")
        slots = resolver.get_available_slots(
            TENANT, salon.haircut.id, MONDAY, staff_id=salon.maria.id
        )
        assert {slot.staff_id for slot in slots} == {salon.maria.id}

    def test_unknown_staff_filter_is_not_found(self, resolver, salon) -> None:
        with pytest.raises(NotFoundException):
            resolver.get_available_slots(TENANT, salon.haircut.id, MONDAY, staff_id="missing")

    def test_inactive_service_is_not_found(self, db, resolver, salon) -> None:
        retired = make_service(db, name="Perm", active=False)
        with pytest.raises(NotFoundException):
            resolver.get_available_slots(TENANT, retired.id, MONDAY)
