from __future__ import annotations

from datetime import date, datetime

import pytest

from salonbook.models import BookingStatus
from tests.factories.salon_builders import (
    MONDAY,
    OTHER_TENANT,
    TENANT,
    admin_headers,
    at,
    customer_headers,
    make_ban,
    make_booking,
    make_service,
    make_staff,
    make_time_off,
)


def _parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestAdminAccess:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/api/admin/bookings"),
            ("get", "/api/admin/customers/ban"),
            ("delete", "/api/admin/bookings/some-id"),
        ],
    )
    def test_customer_is_forbidden(self, client, salon, method, path) -> None:
        response = getattr(client, method)(path, headers=customer_headers())
        assert response.status_code == 403
        assert response.json()["code"] == "ADMIN_REQUIRED"

    def test_anonymous_is_unauthorized(self, client, salon) -> None:
        response = client.get("/api/admin/bookings", headers={"x-tenant-id": TENANT})
        assert response.status_code == 401

    def test_owner_counts_as_admin(self, client, salon) -> None:
        headers = {"x-tenant-id": TENANT, "x-user-role": "owner", "x-user-email": "owner@salon.example"}
        assert client.get("/api/admin/bookings", headers=headers).status_code == 200


class TestAdminBookings:
    def test_list_with_filters_and_pagination(self, db, client, salon) -> None:
        ada = make_staff(db, name="Ada")
        for hour in (9, 10, 11):
            make_booking(db, salon.haircut, salon.maria, at(MONDAY, hour))
        make_booking(db, salon.haircut, ada, at(MONDAY, 9))
        make_booking(
            db, salon.haircut, salon.maria, at(MONDAY, 13), status=BookingStatus.CANCELLED
        )

        response = client.get(
            "/api/admin/bookings",
            params={
                "staffId": salon.maria.id,
                "status": "CONFIRMED",
                "from": at(MONDAY, 0).isoformat(),
                "to": at(MONDAY, 23, 59).isoformat(),
                "page": 1,
                "limit": 2,
            },
            headers=admin_headers(),
        )

        assert response.status_code == 200
        data = response.json()
        assert [_parse(item["start_at"]) for item in data["bookings"]] == [
            at(MONDAY, 9),
            at(MONDAY, 10),
        ]
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    def test_list_is_tenant_scoped(self, db, client, salon) -> None:
        make_booking(db, salon.haircut, salon.maria, at(MONDAY, 9))
        response = client.get("/api/admin/bookings", headers=admin_headers(tenant_id=OTHER_TENANT))
        assert response.json()["bookings"] == []

    def test_invalid_status_filter_is_400(self, client, salon) -> None:
        response = client.get(
            "/api/admin/bookings", params={"status": "PENDING"}, headers=admin_headers()
        )
        assert response.status_code == 400

    def test_admin_books_for_banned_customer_outside_hours(self, db, client, salon) -> None:
        make_ban(db, "mallory@example.com")
        response = client.post(
            "/api/admin/bookings",
            json={
                "serviceId": salon.haircut.id,
                "staffId": salon.maria.id,
                "customerEmail": "mallory@example.com",
                "start": at(MONDAY, 19).isoformat(),
            },
            headers=admin_headers(),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["customer_email"] == "mallory@example.com"
        assert data["created_by"] == "boss@salon.example"

    def test_admin_books_inactive_service(self, db, client, salon) -> None:
        retired = make_service(db, name="Perm", duration_minutes=90, active=False)
        response = client.post(
            "/api/admin/bookings",
            json={
                "serviceId": retired.id,
                "staffId": salon.maria.id,
                "customerEmail": "anna@example.com",
                "start": at(MONDAY, 10).isoformat(),
            },
            headers=admin_headers(),
        )
        assert response.status_code == 201
        assert _parse(response.json()["end_at"]) == at(MONDAY, 11, 30)

    def test_admin_overlap_is_409(self, db, client, salon) -> None:
        make_booking(db, salon.haircut, salon.maria, at(MONDAY, 10))
        response = client.post(
            "/api/admin/bookings",
            json={
                "serviceId": salon.haircut.id,
                "staffId": salon.maria.id,
                "customerEmail": "bob@example.com",
                "start": at(MONDAY, 10, 30).isoformat(),
            },
            headers=admin_headers(),
        )
        assert response.status_code == 409

    def test_admin_time_off_is_409(self, db, client, salon) -> None:
        make_time_off(db, salon.maria, date(2024, 3, 1), date(2024, 3, 3))
        response = client.post(
            "/api/admin/bookings",
            json={
                "serviceId": salon.haircut.id,
                "staffId": salon.maria.id,
                "customerEmail": "bob@example.com",
                "start": "2024-03-02T15:00:00Z",
            },
            headers=admin_headers(),
        )
        assert response.status_code == 409

    def test_admin_cancel(self, db, client, salon) -> None:
        booking = make_booking(db, salon.haircut, salon.maria, at(MONDAY, 10))
        response = client.delete(f"/api/admin/bookings/{booking.id}", headers=admin_headers())
        assert response.status_code == 204

        listing = client.get(
            "/api/admin/bookings", params={"status": "CANCELLED"}, headers=admin_headers()
        ).json()
        assert listing["bookings"][0]["cancelled_by"] == "boss@salon.example"


class TestAdminSchedules:
    def test_add_list_delete_schedule(self, client, salon) -> None:
        base = f"/api/admin/staff/{salon.maria.id}/schedules"
        created = client.post(
            base,
            json={"weekday": 2, "startMinute": 600, "endMinute": 900},
            headers=admin_headers(),
        )
        assert created.status_code == 201
        schedule_id = created.json()["id"]

        listed = client.get(base, headers=admin_headers()).json()
        assert {item["weekday"] for item in listed} == {0, 2}

        assert client.delete(f"{base}/{schedule_id}", headers=admin_headers()).status_code == 204
        assert client.delete(f"{base}/{schedule_id}", headers=admin_headers()).status_code == 404

    def test_overlapping_schedule_is_409(self, client, salon) -> None:
        response = client.post(
            f"/api/admin/staff/{salon.maria.id}/schedules",
            json={"weekday": 0, "start_minute": 600, "end_minute": 700},
            headers=admin_headers(),
        )
        assert response.status_code == 409

    def test_empty_window_is_400(self, client, salon) -> None:
        response = client.post(
            f"/api/admin/staff/{salon.maria.id}/schedules",
            json={"weekday": 3, "start_minute": 700, "end_minute": 600},
            headers=admin_headers(),
        )
        assert response.status_code == 400

    def test_update_schedule(self, client, salon) -> None:
        base = f"/api/admin/staff/{salon.maria.id}/schedules"
        schedule_id = client.get(base, headers=admin_headers()).json()[0]["id"]

        response = client.put(
            f"{base}/{schedule_id}",
            json={"weekday": 0, "startMinute": 480, "endMinute": 1080},
            headers=admin_headers(),
        )

        assert response.status_code == 200
        assert response.json()["id"] == schedule_id
        assert (response.json()["start_minute"], response.json()["end_minute"]) == (480, 1080)

    def test_update_schedule_into_overlap_is_409(self, client, salon) -> None:
        base = f"/api/admin/staff/{salon.maria.id}/schedules"
        created = client.post(
            base, json={"weekday": 1, "startMinute": 540, "endMinute": 600}, headers=admin_headers()
        )
        response = client.put(
            f"{base}/{created.json()['id']}",
            json={"weekday": 0, "startMinute": 960, "endMinute": 1080},
            headers=admin_headers(),
        )
        assert response.status_code == 409
        assert response.json()["code"] == "SCHEDULE_OVERLAP"

    def test_update_unknown_schedule_is_404(self, client, salon) -> None:
        response = client.put(
            f"/api/admin/staff/{salon.maria.id}/schedules/missing",
            json={"weekday": 0, "startMinute": 540, "endMinute": 600},
            headers=admin_headers(),
        )
        assert response.status_code == 404

    def test_update_time_off(self, db, client, salon) -> None:
        time_off = make_time_off(db, salon.maria, date(2024, 3, 1), date(2024, 3, 3))
        url = f"/api/admin/staff/{salon.maria.id}/timeoff/{time_off.id}"

        response = client.put(
            url,
            json={"dateFrom": "2024-04-01", "dateTo": "2024-04-02", "reason": "Course"},
            headers=admin_headers(),
        )
        assert response.status_code == 200
        assert response.json()["date_from"] == "2024-04-01"
        assert response.json()["reason"] == "Course"

        reversed_range = client.put(
            url, json={"dateFrom": "2024-04-03", "dateTo": "2024-04-02"}, headers=admin_headers()
        )
        assert reversed_range.status_code == 400

    def test_update_time_off_of_other_staff_is_404(self, db, client, salon) -> None:
        ada = make_staff(db, name="Ada")
        time_off = make_time_off(db, ada, date(2024, 3, 1), date(2024, 3, 3))
        response = client.put(
            f"/api/admin/staff/{salon.maria.id}/timeoff/{time_off.id}",
            json={"dateFrom": "2024-03-01", "dateTo": "2024-03-02"},
            headers=admin_headers(),
        )
        assert response.status_code == 404

    def test_time_off_roundtrip(self, client, salon) -> None:
        base = f"/api/admin/staff/{salon.maria.id}/timeoff"
        created = client.post(
            base,
            json={"dateFrom": "2024-03-01", "dateTo": "2024-03-03", "reason": "Vacation"},
            headers=admin_headers(),
        )
        assert created.status_code == 201
        assert created.json()["date_to"] == "2024-03-03"

        listed = client.get(base, headers=admin_headers()).json()
        assert [item["reason"] for item in listed] == ["Vacation"]

    def test_reversed_time_off_is_400(self, client, salon) -> None:
        response = client.post(
            f"/api/admin/staff/{salon.maria.id}/timeoff",
            json={"dateFrom": "2024-03-03", "dateTo": "2024-03-01"},
            headers=admin_headers(),
        )
        assert response.status_code == 400

    def test_unknown_staff_is_404(self, client, salon) -> None:
        response = client.get("/api/admin/staff/missing/timeoff", headers=admin_headers())
        assert response.status_code == 404


class TestAdminBans:
    def test_ban_blocks_customer_booking(self, client, salon) -> None:
        created = client.post(
            "/api/admin/customers/ban",
            json={"email": "Mallory@Example.com", "reason": "No-shows"},
            headers=admin_headers(),
        )
        assert created.status_code == 201
        assert created.json()["email"] == "mallory@example.com"

        duplicate = client.post(
            "/api/admin/customers/ban",
            json={"email": "mallory@example.com"},
            headers=admin_headers(),
        )
        assert duplicate.status_code == 409

    def test_unban(self, db, client, salon) -> None:
        make_ban(db, "mallory@example.com")
        response = client.delete(
            "/api/admin/customers/ban/mallory@example.com", headers=admin_headers()
        )
        assert response.status_code == 204
        assert client.get("/api/admin/customers/ban", headers=admin_headers()).json() == []

    def test_unban_unknown_is_404(self, client, salon) -> None:
        response = client.delete(
            "/api/admin/customers/ban/nobody@example.com", headers=admin_headers()
        )
        assert response.status_code == 404
