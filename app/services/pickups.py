"""Pickup request browsing - status/priority listing with an optional radius filter."""

import logging
from uuid import UUID

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import get_settings
from app.models import PickupPriority, PickupRequest, PickupStatus, User
from app.schemas.pickup_request import PickupListing
from app.services.exceptions import InvalidStatusError, ValidationError
from app.services.geo import estimate_travel_minutes, filter_by_distance, validate_coordinates

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20

# high > medium > low; unknown values sort last
_priority_rank = case(
    (PickupRequest.priority == PickupPriority.HIGH.value, 3),
    (PickupRequest.priority == PickupPriority.MEDIUM.value, 2),
    (PickupRequest.priority == PickupPriority.LOW.value, 1),
    else_=0,
)

_VALID_STATUSES = {s.value for s in PickupStatus}
_VALID_PRIORITIES = {p.value for p in PickupPriority}


def _charity_name(request: PickupRequest) -> str | None:
    charity = request.charity
    if charity is None:
        return None
    if charity.charity_profile is not None:
        return charity.charity_profile.charity_name
    return charity.name


def _to_listing(request: PickupRequest) -> PickupListing:
    listing = PickupListing.model_validate(request)
    listing.charity_name = _charity_name(request)
    return listing


async def list_pickup_requests(
    db: AsyncSession,
    observer: list[float] | None = None,
    radius_km: float | None = None,
    status: str | None = PickupStatus.AVAILABLE.value,
    priority: str | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[PickupListing]:
    """Browse pickup requests.

    The base query filters on status/priority and orders by priority then
    recency, newest first; ``limit`` applies to that base query. When an
    ``observer`` ``[lat, lon]`` is given every row gets a distance and a
    travel estimate, and rows farther than ``radius_km`` or with no usable
    coordinates are dropped, so fewer than ``limit`` rows may come back.
    """
    if status is not None and status not in _VALID_STATUSES:
        raise InvalidStatusError(f"Invalid status '{status}'")
    if priority is not None and priority not in _VALID_PRIORITIES:
        raise ValidationError(f"Invalid priority '{priority}'")
    if observer is not None:
        observer = list(validate_coordinates(observer))

    settings = get_settings()
    if radius_km is None:
        radius_km = settings.default_search_radius_km

    query = select(PickupRequest).options(
        selectinload(PickupRequest.charity).selectinload(User.charity_profile)
    )
    if status is not None:
        query = query.where(PickupRequest.status == status)
    if priority is not None:
        query = query.where(PickupRequest.priority == priority)
    query = query.order_by(_priority_rank.desc(), PickupRequest.created_at.desc()).limit(limit)

    result = await db.execute(query)
    requests = list(result.scalars().all())

    if observer is None:
        return [_to_listing(r) for r in requests]

    nearby = filter_by_distance(requests, observer, radius_km, lambda r: r.pickup_coordinates)
    logger.debug(
        f"Radius {radius_km} km around {observer} kept {len(nearby)} of {len(requests)} requests"
    )

    listings = []
    for request, distance in nearby:
        listing = _to_listing(request)
        listing.distance_km = distance
        listing.estimated_minutes = estimate_travel_minutes(distance, settings.average_speed_kmh)
        listings.append(listing)
    return listings


async def list_volunteer_pickups(
    db: AsyncSession, volunteer_id: UUID, status: str | None = None
) -> list[PickupListing]:
    """Requests bound to a volunteer, newest first."""
    if status is not None and status not in _VALID_STATUSES:
        raise InvalidStatusError(f"Invalid status '{status}'")

    query = (
        select(PickupRequest)
        .where(PickupRequest.volunteer_id == volunteer_id)
        .options(selectinload(PickupRequest.charity).selectinload(User.charity_profile))
        .order_by(PickupRequest.created_at.desc())
    )
    if status is not None:
        query = query.where(PickupRequest.status == status)

    result = await db.execute(query)
    return [_to_listing(r) for r in result.scalars().all()]
