"""Volunteer matching - who can take a pickup at a given moment."""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import VolunteerAvailability
from app.schemas.availability import (
    Preferences,
    VolunteerMatchResponse,
    VolunteerSummary,
)
from app.services.availability import (
    is_available_at,
    list_active_availability,
    schedule_from_record,
)
from app.services.geo import filter_by_distance, validate_coordinates

logger = logging.getLogger(__name__)


def _to_match(
    availability: VolunteerAvailability, preferences: Preferences, distance: float | None = None
) -> VolunteerMatchResponse:
    return VolunteerMatchResponse(
        volunteer=VolunteerSummary.model_validate(availability.volunteer),
        availability_id=availability.id,
        preferences=preferences,
        distance_km=distance,
    )


async def find_available_volunteers(
    db: AsyncSession,
    requested_at: datetime,
    near: list[float] | None = None,
    radius_km: float | None = None,
) -> list[VolunteerMatchResponse]:
    """Volunteers whose active schedule covers ``requested_at``.

    Time is the only matching criterion. When ``near`` (a ``[lat, lon]``
    pair) is given, matches are additionally narrowed to volunteers whose
    stored location is within ``radius_km``; volunteers without a location
    are dropped in that case.

    Preferences such as ``max_pickups_per_day`` are returned, not enforced.
    """
    if near is not None:
        near = list(validate_coordinates(near))

    records = await list_active_availability(db)

    available: list[tuple[VolunteerAvailability, Preferences]] = []
    for record in records:
        if record.volunteer is None or not record.volunteer.is_active:
            continue
        schedule = schedule_from_record(record)
        if schedule is None:
            continue
        if is_available_at(schedule, requested_at):
            available.append((record, schedule.preferences))

    logger.info(
        f"Matched {len(available)} of {len(records)} active schedules at {requested_at.isoformat()}"
    )

    if near is None:
        return [_to_match(record, prefs) for record, prefs in available]

    nearby = filter_by_distance(available, near, radius_km, lambda pair: pair[0].volunteer.location)
    return [_to_match(record, prefs, distance) for (record, prefs), distance in nearby]
