"""Volunteer availability API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import domain_http_error, get_db, require_permission
from app.models import User, VolunteerAvailability
from app.schemas.availability import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    AvailabilityResponse,
    FindVolunteersRequest,
    FindVolunteersResponse,
    MyAvailabilityResponse,
    ScheduleVariant,
    TemporaryUnavailabilityCreate,
    TemporaryUnavailabilityListResponse,
)
from app.services import availability as availability_service
from app.services import matching as matching_service
from app.services.exceptions import DomainError

router = APIRouter(prefix="/availability", tags=["availability"])

VolunteerUser = Annotated[User, Depends(require_permission("manage_own_availability"))]


@router.post(
    "",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create or replace my availability",
)
async def set_availability(
    schedule: Annotated[ScheduleVariant, Body(discriminator="type")],
    volunteer: VolunteerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> VolunteerAvailability:
    """Set the volunteer's schedule, replacing any existing one.

    Temporary unavailability windows already on file are kept.
    """
    availability = await availability_service.set_availability(db, volunteer.id, schedule)
    await db.commit()
    return availability


@router.get(
    "/my",
    response_model=MyAvailabilityResponse,
    summary="Get my availability",
)
async def get_my_availability(
    volunteer: VolunteerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MyAvailabilityResponse:
    """Get the volunteer's own schedule, or null if none is set."""
    availability = await availability_service.get_availability(db, volunteer.id)
    if availability is None:
        return MyAvailabilityResponse(data=None, message="No availability schedule set")
    return MyAvailabilityResponse(data=AvailabilityResponse.model_validate(availability))


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete my availability",
)
async def delete_availability(
    volunteer: VolunteerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete the volunteer's schedule."""
    try:
        await availability_service.delete_availability(db, volunteer.id)
    except DomainError as e:
        raise domain_http_error(e) from None
    await db.commit()


@router.post(
    "/unavailable",
    response_model=TemporaryUnavailabilityListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a temporary unavailability window",
)
async def add_unavailable_dates(
    window: TemporaryUnavailabilityCreate,
    volunteer: VolunteerUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TemporaryUnavailabilityListResponse:
    """Append a window during which the volunteer cannot be matched."""
    try:
        windows = await availability_service.add_temporary_unavailability(db, volunteer.id, window)
    except DomainError as e:
        raise domain_http_error(e) from None
    await db.commit()
    return TemporaryUnavailabilityListResponse(
        message="Unavailable dates added successfully", data=windows
    )


@router.post(
    "/check",
    response_model=AvailabilityCheckResponse,
    summary="Check whether I am available at a time",
)
async def check_availability(
    request: AvailabilityCheckRequest,
    volunteer: Annotated[User, Depends(require_permission("check_own_availability"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AvailabilityCheckResponse:
    """Evaluate the volunteer's schedule at ``date_time``."""
    available = await availability_service.check_volunteer_availability(
        db, volunteer.id, request.date_time
    )
    if available is None:
        return AvailabilityCheckResponse(
            available=False,
            date_time=request.date_time,
            message="No availability schedule set",
        )
    return AvailabilityCheckResponse(available=available, date_time=request.date_time)


@router.post(
    "/find-volunteers",
    response_model=FindVolunteersResponse,
    summary="Find volunteers available at a time (admin)",
)
async def find_available_volunteers(
    request: FindVolunteersRequest,
    admin: Annotated[User, Depends(require_permission("find_volunteers"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> FindVolunteersResponse:
    """Volunteers whose schedule covers ``pickup_date_time``.

    With ``location`` the result is narrowed to volunteers within
    ``radius_km`` of it.
    """
    try:
        matches = await matching_service.find_available_volunteers(
            db,
            request.pickup_date_time,
            near=request.location,
            radius_km=request.radius_km,
        )
    except DomainError as e:
        raise domain_http_error(e) from None
    return FindVolunteersResponse(count=len(matches), data=matches)
