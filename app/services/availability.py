"""Availability service - volunteer schedules and the "available at T?" resolver."""

import logging
from datetime import datetime, tzinfo
from uuid import UUID
from zoneinfo import ZoneInfo

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import get_settings
from app.models import VolunteerAvailability
from app.schemas.availability import (
    AlwaysAvailableSchedule,
    AvailabilitySchedule,
    DateRangeSchedule,
    RecurringWeeklySchedule,
    SpecificDatesSchedule,
    TemporaryUnavailability,
    TimeSlot,
)
from app.services.exceptions import AvailabilityNotFoundError, ScheduleNotSetError

logger = logging.getLogger(__name__)

_schedule_adapter: TypeAdapter[AvailabilitySchedule] = TypeAdapter(AvailabilitySchedule)


def get_schedule_timezone() -> ZoneInfo:
    """Zone in which time slots are interpreted."""
    return ZoneInfo(get_settings().schedule_timezone)


def _to_local(moment: datetime, tz: tzinfo) -> datetime:
    """Naive wall-clock time in ``tz``; naive inputs are taken as already local."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(tz).replace(tzinfo=None)


def _matches_any(slots: list[TimeSlot], time_of_day: str) -> bool:
    return any(slot.contains(time_of_day) for slot in slots)


def is_available_at(
    schedule: AvailabilitySchedule | None,
    instant: datetime,
    tz: tzinfo | None = None,
) -> bool:
    """Decide whether a volunteer with ``schedule`` can be matched at ``instant``.

    Order of evaluation:
    1. inactive schedule -> unavailable
    2. instant inside any temporary unavailability window (inclusive) -> unavailable
    3. dispatch on the schedule shape

    Never raises: a missing or malformed schedule is simply "unavailable".
    Day of week follows 0=Sunday ... 6=Saturday.
    """
    if schedule is None or not schedule.is_active:
        return False

    tz = tz or get_schedule_timezone()
    try:
        local = _to_local(instant, tz)

        for window in schedule.temporary_unavailability:
            if _to_local(window.start_date, tz) <= local <= _to_local(window.end_date, tz):
                return False

        day_of_week = local.isoweekday() % 7
        time_of_day = local.strftime("%H:%M")

        if isinstance(schedule, AlwaysAvailableSchedule):
            return not schedule.general_time_slots or _matches_any(
                schedule.general_time_slots, time_of_day
            )

        if isinstance(schedule, RecurringWeeklySchedule):
            day = next(
                (d for d in schedule.recurring_schedule if d.day_of_week == day_of_week), None
            )
            return day is not None and _matches_any(day.time_slots, time_of_day)

        if isinstance(schedule, SpecificDatesSchedule):
            entry = next((d for d in schedule.specific_dates if d.date == local.date()), None)
            return entry is not None and _matches_any(entry.time_slots, time_of_day)

        if isinstance(schedule, DateRangeSchedule):
            date_range = schedule.date_range
            if not date_range.start_date <= local.date() <= date_range.end_date:
                return False
            if date_range.days_of_week and day_of_week not in date_range.days_of_week:
                return False
            return _matches_any(date_range.time_slots, time_of_day)
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Could not evaluate availability at {instant!r}: {e}")
        return False

    return False


def schedule_from_record(record: VolunteerAvailability) -> AvailabilitySchedule | None:
    """Typed view of a stored schedule.

    Only the sub-structure named by ``record.type`` is handed to the
    validator. Returns None for unknown types or rows that do not validate.
    """
    data: dict = {
        "type": record.type,
        "is_active": record.is_active,
        "temporary_unavailability": record.temporary_unavailability or [],
        "preferences": record.preferences or {},
        "notes": record.notes,
    }
    if record.type == "recurring_weekly":
        data["recurring_schedule"] = record.recurring_schedule
    elif record.type == "specific_dates":
        data["specific_dates"] = record.specific_dates
    elif record.type == "date_range":
        data["date_range"] = record.date_range
    elif record.type == "always_available":
        data["general_time_slots"] = record.general_time_slots or []
    else:
        logger.warning(f"Availability {record.id} has unknown type '{record.type}'")
        return None

    try:
        return _schedule_adapter.validate_python(data)
    except PydanticValidationError as e:
        logger.warning(f"Availability {record.id} failed validation: {e.error_count()} errors")
        return None


async def get_availability(db: AsyncSession, volunteer_id: UUID) -> VolunteerAvailability | None:
    """Get a volunteer's schedule."""
    result = await db.execute(
        select(VolunteerAvailability).where(VolunteerAvailability.volunteer_id == volunteer_id)
    )
    return result.scalar_one_or_none()


async def list_active_availability(db: AsyncSession) -> list[VolunteerAvailability]:
    """All active schedules with their volunteers loaded."""
    result = await db.execute(
        select(VolunteerAvailability)
        .where(VolunteerAvailability.is_active == True)
        .options(selectinload(VolunteerAvailability.volunteer))
    )
    return list(result.scalars().all())


async def set_availability(
    db: AsyncSession, volunteer_id: UUID, schedule: AvailabilitySchedule
) -> VolunteerAvailability:
    """Create or replace a volunteer's schedule.

    The replace is wholesale: sub-structures of other shapes are cleared.
    Temporary unavailability windows are the exception - existing windows are
    kept and any windows in ``schedule`` are appended.
    """
    payload = schedule.model_dump(mode="json")
    availability = await get_availability(db, volunteer_id)

    if availability is None:
        availability = VolunteerAvailability(volunteer_id=volunteer_id)
        db.add(availability)
        existing_windows: list = []
    else:
        existing_windows = list(availability.temporary_unavailability or [])

    availability.type = payload["type"]
    availability.recurring_schedule = payload.get("recurring_schedule", [])
    availability.specific_dates = payload.get("specific_dates", [])
    availability.date_range = payload.get("date_range")
    availability.general_time_slots = payload.get("general_time_slots", [])
    availability.temporary_unavailability = existing_windows + payload["temporary_unavailability"]
    availability.preferences = payload["preferences"]
    availability.is_active = payload["is_active"]
    availability.notes = payload["notes"]

    await db.flush()
    await db.refresh(availability)
    logger.info(f"Set {availability.type} availability for volunteer {volunteer_id}")
    return availability


async def delete_availability(db: AsyncSession, volunteer_id: UUID) -> None:
    """Delete a volunteer's schedule."""
    availability = await get_availability(db, volunteer_id)
    if availability is None:
        raise AvailabilityNotFoundError("No availability found to delete")
    await db.delete(availability)
    await db.flush()


async def add_temporary_unavailability(
    db: AsyncSession, volunteer_id: UUID, window: TemporaryUnavailability
) -> list[dict]:
    """Append an override window. Returns all windows after the append."""
    availability = await get_availability(db, volunteer_id)
    if availability is None:
        logger.warning(f"Volunteer {volunteer_id} added unavailability without a schedule")
        raise ScheduleNotSetError(
            "You must set your main availability schedule before adding unavailable dates."
        )

    # Reassign rather than append in place so the JSON column is marked dirty
    availability.temporary_unavailability = [
        *(availability.temporary_unavailability or []),
        window.model_dump(mode="json"),
    ]
    await db.flush()
    await db.refresh(availability)
    return availability.temporary_unavailability


async def check_volunteer_availability(
    db: AsyncSession, volunteer_id: UUID, instant: datetime
) -> bool | None:
    """Whether a volunteer is available at ``instant``; None if no schedule is set."""
    availability = await get_availability(db, volunteer_id)
    if availability is None:
        return None
    return is_available_at(schedule_from_record(availability), instant)
