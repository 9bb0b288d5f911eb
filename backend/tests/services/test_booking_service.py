from __future__ import annotations

from datetime import timedelta
from unittest.mock import Mock

import pytest
from sqlalchemy.orm import Session

from salonbook.core.exceptions import (
    BookingConflictException,
    CustomerBannedException,
    NotFoundException,
)
from salonbook.events import BookingCreated, EventPublisher
from salonbook.models import Booking, BookingStatus
from salonbook.principal import AdminIdentity, CustomerIdentity
from salonbook.repositories import BookingFilters
from salonbook.services.booking_service import BookingRequest, BookingService
from tests.factories.salon_builders import (
    MONDAY,
    OTHER_TENANT,
    TENANT,
    at,
    make_ban,
    make_booking,
    make_service,
    make_staff,
)


@pytest.fixture
def publisher() -> Mock:
    return Mock()


@pytest.fixture
def booking_service(db: Session, publisher: Mock) -> BookingService:
    return BookingService(db, event_publisher=publisher)


def _request(salon, start_at, email="anna@example.com") -> BookingRequest:
    return BookingRequest(
        service_id=salon.haircut.id,
        staff_id=salon.maria.id,
        customer_email=email,
        start_at=start_at,
    )


class TestCreateBooking:
    def test_customer_booking_is_confirmed(self, booking_service, salon, publisher) -> None:
        booking = booking_service.create_booking(
            TENANT, _request(salon, at(MONDAY, 10)), CustomerIdentity(email="anna@example.com")
        )

        assert booking.status == BookingStatus.CONFIRMED.value
        assert booking.tenant_id == TENANT
        assert booking.start_at == at(MONDAY, 10)
        assert booking.end_at == at(MONDAY, 10, 45)
        assert booking.created_by == "anna@example.com"
        assert booking.service.name == "Haircut"
        assert booking.staff.name == "Maria"

        publisher.publish.assert_called_once()
        event = publisher.publish.call_args.args[0]
        assert isinstance(event, BookingCreated)
        assert event.booking_id == booking.id

    def test_email_is_normalized(self, booking_service, salon) -> None:
        booking = booking_service.create_booking(
            TENANT,
            _request(salon, at(MONDAY, 10), email="  Anna@Example.COM "),
            CustomerIdentity(email="anna@example.com"),
        )
        assert booking.customer_email == "anna@example.com"

    def test_admin_booking_records_admin(self, booking_service, salon) -> None:
        booking = booking_service.create_booking(
            TENANT, _request(salon, at(MONDAY, 10)), AdminIdentity(email="boss@salon.example")
        )
        assert booking.created_by == "boss@salon.example"
        assert booking.customer_email == "anna@example.com"

    def test_admin_without_email_leaves_created_by_empty(self, booking_service, salon) -> None:
        booking = booking_service.create_booking(
            TENANT, _request(salon, at(MONDAY, 10)), AdminIdentity()
        )
        assert booking.created_by is None

    def test_banned_customer_cannot_book(self, db, booking_service, salon, publisher) -> None:
        make_ban(db, "mallory@example.com")
        with pytest.raises(CustomerBannedException):
            booking_service.create_booking(
                TENANT,
                _request(salon, at(MONDAY, 10), email="mallory@example.com"),
                CustomerIdentity(email="mallory@example.com"),
            )
        assert db.query(Booking).count() == 0
        publisher.publish.assert_not_called()

    def test_admin_books_for_banned_customer(self, db, booking_service, salon) -> None:
        make_ban(db, "mallory@example.com")
        booking = booking_service.create_booking(
            TENANT,
            _request(salon, at(MONDAY, 10), email="mallory@example.com"),
            AdminIdentity(email="boss@salon.example"),
        )
        assert booking.customer_email == "mallory@example.com"

    def test_overlap_is_rejected(self, db, booking_service, salon) -> None:
        make_booking(db, salon.haircut, salon.maria, at(MONDAY, 10))
        with pytest.raises(BookingConflictException):
            booking_service.create_booking(
                TENANT, _request(salon, at(MONDAY, 10, 30)), CustomerIdentity(email="anna@example.com")
            )
        assert db.query(Booking).count() == 1

    def test_back_to_back_bookings(self, booking_service, salon) -> None:
        customer = CustomerIdentity(email="anna@example.com")
        first = booking_service.create_booking(TENANT, _request(salon, at(MONDAY, 10)), customer)
        second = booking_service.create_booking(
            TENANT, _request(salon, at(MONDAY, 10, 45)), customer
        )
        assert first.end_at == second.start_at

    def test_same_staff_id_in_other_tenant_is_not_found(self, booking_service, salon) -> None:
        with pytest.raises(NotFoundException):
            booking_service.create_booking(
                OTHER_TENANT, _request(salon, at(MONDAY, 10)), AdminIdentity()
            )

    def test_end_time_survives_service_duration_change(self, db, booking_service, salon) -> None:
        booking = booking_service.create_booking(
            TENANT, _request(salon, at(MONDAY, 10)), CustomerIdentity(email="anna@example.com")
        )
        salon.haircut.duration_minutes = 90
        db.commit()
        db.expire_all()

        reloaded = booking_service.get_booking(TENANT, booking.id)
        assert reloaded.end_at == at(MONDAY, 10, 45)
        assert reloaded.service.duration_minutes == 90

    def test_failed_publish_hook_does_not_undo_booking(self, db, salon) -> None:
        def explode(event_type, payload):
            raise RuntimeError("mail server down")

        service = BookingService(db, event_publisher=EventPublisher({"BookingCreated": [explode]}))
        booking = service.create_booking(
            TENANT, _request(salon, at(MONDAY, 10)), CustomerIdentity(email="anna@example.com")
        )
        assert db.query(Booking).filter(Booking.id == booking.id).count() == 1


class TestReads:
    def test_get_booking_is_tenant_scoped(self, db, booking_service, salon) -> None:
        booking = make_booking(db, salon.haircut, salon.maria, at(MONDAY, 10))
        assert booking_service.get_booking(TENANT, booking.id).id == booking.id
        with pytest.raises(NotFoundException):
            booking_service.get_booking(OTHER_TENANT, booking.id)

    def test_my_bookings_are_future_confirmed_only(self, db, booking_service, salon) -> None:
        now = at(MONDAY, 12)
        make_booking(db, salon.haircut, salon.maria, at(MONDAY, 9))
        upcoming = make_booking(db, salon.haircut, salon.maria, at(MONDAY, 14))
        make_booking(
            db, salon.haircut, salon.maria, at(MONDAY, 15), status=BookingStatus.CANCELLED
        )
        make_booking(
            db, salon.haircut, salon.maria, at(MONDAY, 16), customer_email="bob@example.com"
        )
        later = make_booking(
            db, salon.haircut, salon.maria, at(MONDAY + timedelta(days=7), 10)
        )

        result = booking_service.list_my_bookings(TENANT, "ANNA@example.com", now=now)

        assert [booking.id for booking in result] == [upcoming.id, later.id]
        assert result[0].service.name == "Haircut"
        assert result[0].staff.name == "Maria"

    def test_list_bookings_filters_and_paginates(self, db, booking_service, salon) -> None:
        ada = make_staff(db, name="Ada")
        for hour in (9, 10, 11, 12, 13):
            make_booking(db, salon.haircut, salon.maria, at(MONDAY, hour))
        make_booking(db, salon.haircut, ada, at(MONDAY, 9))
        make_booking(
            db, salon.haircut, salon.maria, at(MONDAY, 14), status=BookingStatus.CANCELLED
        )

        page = booking_service.list_bookings(
            TENANT,
            BookingFilters(staff_id=salon.maria.id, status=BookingStatus.CONFIRMED.value),
            page=2,
            limit=2,
        )

        assert [booking.start_at for booking in page.bookings] == [at(MONDAY, 11), at(MONDAY, 12)]
        assert page.pagination.to_dict() == {"page": 2, "limit": 2, "total": 5, "pages": 3}

    def test_list_bookings_date_bounds_are_inclusive(self, db, booking_service, salon) -> None:
        for hour in (9, 10, 11):
            make_booking(db, salon.haircut, salon.maria, at(MONDAY, hour))

        page = booking_service.list_bookings(
            TENANT, BookingFilters(date_from=at(MONDAY, 10), date_to=at(MONDAY, 11))
        )

        assert [booking.start_at for booking in page.bookings] == [at(MONDAY, 10), at(MONDAY, 11)]

    def test_list_bookings_excludes_other_tenant(self, db, booking_service) -> None:
        other_service = make_service(db, tenant_id=OTHER_TENANT)
        other_staff = make_staff(db, tenant_id=OTHER_TENANT)
        make_booking(db, other_service, other_staff, at(MONDAY, 10))

        page = booking_service.list_bookings(TENANT)

        assert page.bookings == []
        assert page.pagination.total == 0
        assert page.pagination.pages == 0
