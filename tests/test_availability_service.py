"""Tests for storing and checking volunteer schedules."""

from datetime import date, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User
from app.schemas.availability import (
    AlwaysAvailableSchedule,
    RecurringDay,
    RecurringWeeklySchedule,
    TemporaryUnavailability,
    TimeSlot,
)
from app.services.availability import (
    add_temporary_unavailability,
    check_volunteer_availability,
    delete_availability,
    get_availability,
    set_availability,
)
from app.services.exceptions import AvailabilityNotFoundError, ScheduleNotSetError

MONDAY_10AM = datetime(2024, 11, 25, 10, 0)
MONDAY_8AM = datetime(2024, 11, 25, 8, 0)


def weekly_schedule(**kwargs) -> RecurringWeeklySchedule:
    return RecurringWeeklySchedule(
        recurring_schedule=[
            RecurringDay(
                day_of_week=1, time_slots=[TimeSlot(start_time="09:00", end_time="17:00")]
            )
        ],
        **kwargs,
    )


def window(day: str, reason: str | None = None) -> TemporaryUnavailability:
    return TemporaryUnavailability.model_validate(
        {"start_date": day, "end_date": day, "reason": reason}
    )


class TestSetAvailability:
    """Tests for set_availability."""

    async def test_creates_schedule(self, db: AsyncSession, volunteer: User):
        """First call creates the row."""
        availability = await set_availability(db, volunteer.id, weekly_schedule())

        assert availability.volunteer_id == volunteer.id
        assert availability.type == "recurring_weekly"
        assert availability.recurring_schedule == [
            {"day_of_week": 1, "time_slots": [{"start_time": "09:00", "end_time": "17:00"}]}
        ]
        assert availability.preferences == {
            "max_pickups_per_day": 3,
            "transportation_mode": "car",
        }

    async def test_replace_clears_other_shapes(self, db: AsyncSession, volunteer: User):
        """Switching shape wipes the previous sub-structure."""
        first = await set_availability(db, volunteer.id, weekly_schedule())
        second = await set_availability(db, volunteer.id, AlwaysAvailableSchedule())

        assert second.id == first.id
        assert second.type == "always_available"
        assert second.recurring_schedule == []
        assert second.general_time_slots == []

    async def test_replace_keeps_existing_windows(self, db: AsyncSession, volunteer: User):
        """Temporary windows survive a replace and new ones are appended."""
        await set_availability(db, volunteer.id, weekly_schedule())
        await add_temporary_unavailability(db, volunteer.id, window("2024-12-01", "Travel"))

        replaced = await set_availability(
            db,
            volunteer.id,
            AlwaysAvailableSchedule(temporary_unavailability=[window("2024-12-24")]),
        )

        assert [w["reason"] for w in replaced.temporary_unavailability] == ["Travel", None]

    async def test_one_schedule_per_volunteer(
        self, db: AsyncSession, volunteer: User, volunteer2: User
    ):
        """Each volunteer has their own row."""
        a = await set_availability(db, volunteer.id, weekly_schedule())
        b = await set_availability(db, volunteer2.id, AlwaysAvailableSchedule())

        assert a.id != b.id
        assert (await get_availability(db, volunteer.id)).type == "recurring_weekly"
        assert (await get_availability(db, volunteer2.id)).type == "always_available"


class TestDeleteAvailability:
    """Tests for delete_availability."""

    async def test_delete(self, db: AsyncSession, volunteer: User):
        """Deleting removes the schedule."""
        await set_availability(db, volunteer.id, weekly_schedule())
        await delete_availability(db, volunteer.id)
        assert await get_availability(db, volunteer.id) is None

    async def test_delete_missing(self, db: AsyncSession, volunteer: User):
        """Nothing to delete is a not-found error."""
        with pytest.raises(AvailabilityNotFoundError) as exc_info:
            await delete_availability(db, volunteer.id)
        assert exc_info.value.status_code == 404


class TestTemporaryUnavailability:
    """Tests for add_temporary_unavailability."""

    async def test_requires_schedule(self, db: AsyncSession, volunteer: User):
        """A window cannot be added before a schedule exists."""
        with pytest.raises(ScheduleNotSetError) as exc_info:
            await add_temporary_unavailability(db, volunteer.id, window("2024-11-25"))
        assert exc_info.value.status_code == 400

    async def test_appends_and_returns_all(self, db: AsyncSession, volunteer: User):
        """Windows accumulate."""
        await set_availability(db, volunteer.id, weekly_schedule())
        await add_temporary_unavailability(db, volunteer.id, window("2024-11-25", "Exams"))
        windows = await add_temporary_unavailability(db, volunteer.id, window("2024-12-02"))

        assert len(windows) == 2
        assert windows[0]["reason"] == "Exams"
        assert windows[0]["start_date"].startswith("2024-11-25T00:00")

    async def test_window_blocks_check(self, db: AsyncSession, volunteer: User):
        """A stored window takes effect immediately."""
        await set_availability(db, volunteer.id, weekly_schedule())
        assert await check_volunteer_availability(db, volunteer.id, MONDAY_10AM) is True

        await add_temporary_unavailability(db, volunteer.id, window("2024-11-25"))
        assert await check_volunteer_availability(db, volunteer.id, MONDAY_10AM) is False


class TestCheckVolunteerAvailability:
    """Tests for check_volunteer_availability."""

    async def test_no_schedule(self, db: AsyncSession, volunteer: User):
        """No schedule is reported as None, not False."""
        assert await check_volunteer_availability(db, volunteer.id, MONDAY_10AM) is None

    async def test_inside_and_outside_slot(self, db: AsyncSession, volunteer: User):
        """Stored schedule is evaluated against the instant."""
        await set_availability(db, volunteer.id, weekly_schedule())

        assert await check_volunteer_availability(db, volunteer.id, MONDAY_10AM) is True
        assert await check_volunteer_availability(db, volunteer.id, MONDAY_8AM) is False

    async def test_inactive(self, db: AsyncSession, volunteer: User):
        """An inactive stored schedule is never available."""
        await set_availability(db, volunteer.id, weekly_schedule(is_active=False))
        assert await check_volunteer_availability(db, volunteer.id, MONDAY_10AM) is False

    async def test_stored_dates_round_trip(self, db: AsyncSession, volunteer: User):
        """Date strings stored as JSON still resolve correctly."""
        await set_availability(
            db,
            volunteer.id,
            AlwaysAvailableSchedule(
                temporary_unavailability=[
                    TemporaryUnavailability(
                        start_date=datetime.combine(date(2024, 11, 25), datetime.min.time()),
                        end_date=datetime(2024, 11, 25, 9, 30),
                    )
                ]
            ),
        )

        assert await check_volunteer_availability(db, volunteer.id, MONDAY_8AM) is False
        assert await check_volunteer_availability(db, volunteer.id, MONDAY_10AM) is True
