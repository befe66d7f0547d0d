"""API tests for the availability endpoints."""

from httpx import AsyncClient

from app.models import User
from tests.factories import NAIROBI, auth_headers

WEEKLY = {
    "type": "recurring_weekly",
    "recurring_schedule": [
        {"day_of_week": 1, "time_slots": [{"start_time": "9:00", "end_time": "17:00"}]}
    ],
    "preferences": {"max_pickups_per_day": 2, "transportation_mode": "motorcycle"},
}


class TestAuth:
    """Authentication and role checks."""

    async def test_missing_token(self, client: AsyncClient):
        """No bearer token is a 401."""
        response = await client.get("/api/v1/availability/my")
        assert response.status_code == 401

    async def test_garbage_token(self, client: AsyncClient):
        """An unverifiable token is a 401."""
        response = await client.get(
            "/api/v1/availability/my", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    async def test_wrong_role(self, client: AsyncClient, donor: User):
        """Donors cannot manage volunteer schedules."""
        response = await client.post(
            "/api/v1/availability", json=WEEKLY, headers=auth_headers(donor)
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Only volunteers can perform this action"


class TestSetAvailability:
    """POST /availability and GET /availability/my."""

    async def test_set_and_read_back(self, client: AsyncClient, volunteer: User):
        """The stored schedule is returned on read."""
        headers = auth_headers(volunteer)

        created = await client.post("/api/v1/availability", json=WEEKLY, headers=headers)
        assert created.status_code == 201
        body = created.json()
        assert body["type"] == "recurring_weekly"
        assert body["recurring_schedule"][0]["time_slots"][0]["start_time"] == "09:00"
        assert body["preferences"]["transportation_mode"] == "motorcycle"

        mine = await client.get("/api/v1/availability/my", headers=headers)
        assert mine.status_code == 200
        assert mine.json()["data"]["id"] == body["id"]

    async def test_none_set(self, client: AsyncClient, volunteer: User):
        """No schedule yields null data and a message."""
        response = await client.get("/api/v1/availability/my", headers=auth_headers(volunteer))
        assert response.status_code == 200
        assert response.json() == {"data": None, "message": "No availability schedule set"}

    async def test_unknown_type(self, client: AsyncClient, volunteer: User):
        """The type tag must name a known shape."""
        response = await client.post(
            "/api/v1/availability",
            json={"type": "on_call", "general_time_slots": []},
            headers=auth_headers(volunteer),
        )
        assert response.status_code == 422

    async def test_missing_substructure(self, client: AsyncClient, volunteer: User):
        """A shape without its own sub-structure is rejected."""
        response = await client.post(
            "/api/v1/availability",
            json={"type": "date_range"},
            headers=auth_headers(volunteer),
        )
        assert response.status_code == 422

    async def test_bad_time_format(self, client: AsyncClient, volunteer: User):
        """Times must be H:MM or HH:MM."""
        payload = {
            "type": "always_available",
            "general_time_slots": [{"start_time": "9am", "end_time": "17:00"}],
        }
        response = await client.post(
            "/api/v1/availability", json=payload, headers=auth_headers(volunteer)
        )
        assert response.status_code == 422


class TestDeleteAvailability:
    """DELETE /availability."""

    async def test_delete(self, client: AsyncClient, volunteer: User):
        """Delete then read back nothing."""
        headers = auth_headers(volunteer)
        await client.post("/api/v1/availability", json=WEEKLY, headers=headers)

        response = await client.delete("/api/v1/availability", headers=headers)
        assert response.status_code == 204

        mine = await client.get("/api/v1/availability/my", headers=headers)
        assert mine.json()["data"] is None

    async def test_delete_missing(self, client: AsyncClient, volunteer: User):
        """Nothing to delete is a 404."""
        response = await client.delete("/api/v1/availability", headers=auth_headers(volunteer))
        assert response.status_code == 404


class TestUnavailableDates:
    """POST /availability/unavailable."""

    async def test_requires_schedule(self, client: AsyncClient, volunteer: User):
        """Adding a window before a schedule is a 400."""
        response = await client.post(
            "/api/v1/availability/unavailable",
            json={"start_date": "2024-11-25", "end_date": "2024-11-26"},
            headers=auth_headers(volunteer),
        )
        assert response.status_code == 400

    async def test_add_window_affects_check(self, client: AsyncClient, volunteer: User):
        """A window makes the check come back unavailable."""
        headers = auth_headers(volunteer)
        await client.post("/api/v1/availability", json=WEEKLY, headers=headers)

        added = await client.post(
            "/api/v1/availability/unavailable",
            json={"start_date": "2024-11-25", "end_date": "2024-11-25", "reason": "Exams"},
            headers=headers,
        )
        assert added.status_code == 201
        assert added.json()["data"][0]["reason"] == "Exams"

        check = await client.post(
            "/api/v1/availability/check",
            json={"date_time": "2024-11-25T10:00:00"},
            headers=headers,
        )
        assert check.json()["available"] is False

    async def test_inverted_window(self, client: AsyncClient, volunteer: User):
        """end before start is a schema error."""
        response = await client.post(
            "/api/v1/availability/unavailable",
            json={"start_date": "2024-11-26", "end_date": "2024-11-25"},
            headers=auth_headers(volunteer),
        )
        assert response.status_code == 422


class TestCheckAvailability:
    """POST /availability/check."""

    async def test_check(self, client: AsyncClient, volunteer: User):
        """Monday 10:00 Nairobi time is inside the Monday slot."""
        headers = auth_headers(volunteer)
        await client.post("/api/v1/availability", json=WEEKLY, headers=headers)

        # 07:00Z is 10:00 in Nairobi
        inside = await client.post(
            "/api/v1/availability/check",
            json={"date_time": "2024-11-25T07:00:00Z"},
            headers=headers,
        )
        outside = await client.post(
            "/api/v1/availability/check",
            json={"date_time": "2024-11-26T07:00:00Z"},
            headers=headers,
        )

        assert inside.status_code == 200
        assert inside.json()["available"] is True
        assert outside.json()["available"] is False

    async def test_no_schedule(self, client: AsyncClient, volunteer: User):
        """No schedule is reported as unavailable with a message."""
        response = await client.post(
            "/api/v1/availability/check",
            json={"date_time": "2024-11-25T07:00:00Z"},
            headers=auth_headers(volunteer),
        )
        body = response.json()
        assert body["available"] is False
        assert body["message"] == "No availability schedule set"


class TestFindVolunteers:
    """POST /availability/find-volunteers."""

    async def test_admin_only(self, client: AsyncClient, volunteer: User):
        """Volunteers cannot search for other volunteers."""
        response = await client.post(
            "/api/v1/availability/find-volunteers",
            json={"pickup_date_time": "2024-11-25T07:00:00Z"},
            headers=auth_headers(volunteer),
        )
        assert response.status_code == 403

    async def test_find(
        self, client: AsyncClient, admin: User, volunteer: User, volunteer2: User
    ):
        """Only volunteers available at the time are returned."""
        await client.post(
            "/api/v1/availability", json=WEEKLY, headers=auth_headers(volunteer)
        )
        await client.post(
            "/api/v1/availability",
            json={"type": "specific_dates", "specific_dates": []},
            headers=auth_headers(volunteer2),
        )

        response = await client.post(
            "/api/v1/availability/find-volunteers",
            json={"pickup_date_time": "2024-11-25T07:00:00Z"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["volunteer"]["id"] == str(volunteer.id)
        assert body["data"][0]["preferences"]["max_pickups_per_day"] == 2

    async def test_find_nearby(self, client: AsyncClient, admin: User, volunteer2: User):
        """With a location, volunteers without one are left out."""
        await client.post(
            "/api/v1/availability",
            json={"type": "always_available"},
            headers=auth_headers(volunteer2),
        )

        response = await client.post(
            "/api/v1/availability/find-volunteers",
            json={
                "pickup_date_time": "2024-11-25T07:00:00Z",
                "location": NAIROBI,
                "radius_km": 10,
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["count"] == 0

    async def test_bad_location(self, client: AsyncClient, admin: User):
        """Out-of-range coordinates are a 400."""
        response = await client.post(
            "/api/v1/availability/find-volunteers",
            json={"pickup_date_time": "2024-11-25T07:00:00Z", "location": [0, 500]},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400
