"""Donation and pickup request API endpoints."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import domain_http_error, get_current_user, get_db, require_permission
from app.models import Donation, User, UserRole
from app.schemas.donation import (
    AddressSearchResponse,
    DonationCreate,
    DonationDetailResponse,
    DonationResponse,
    DonationSubmitResponse,
)
from app.schemas.pickup_request import (
    PickupListResponse,
    PickupRequestResponse,
    PickupStatusResponse,
    PickupStatusUpdate,
)
from app.services import donations as donation_service
from app.services import pickup_lifecycle as lifecycle_service
from app.services import pickups as pickup_service
from app.services.exceptions import DomainError
from app.services.geocoding import GeocodingClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/donations", tags=["donations"])


async def get_geocoding_client() -> AsyncGenerator[GeocodingClient, None]:
    """Geocoding client scoped to one request."""
    client = GeocodingClient()
    try:
        yield client
    finally:
        await client.close()


@router.post(
    "",
    response_model=DonationSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a donation",
)
async def submit_donation(
    donation_data: DonationCreate,
    donor: Annotated[User, Depends(require_permission("submit_donation"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DonationSubmitResponse:
    """Submit a donation; its pickup request is created with it."""
    try:
        donation, pickup_request = await donation_service.submit_donation(
            db, donor, donation_data
        )
    except DomainError as e:
        raise domain_http_error(e) from None
    except SQLAlchemyError as e:
        logger.error(f"Error submitting donation for {donor.id}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not save the donation",
        ) from None
    await db.commit()

    return DonationSubmitResponse(
        submission_id=donation.public_id,
        message="Donation submitted successfully",
        donation=DonationResponse.model_validate(donation),
        pickup_request=PickupRequestResponse.model_validate(pickup_request),
    )


@router.get(
    "/pickup-requests",
    response_model=PickupListResponse,
    summary="Browse pickup requests",
)
async def list_pickup_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    lat: Annotated[float | None, Query(description="Observer latitude")] = None,
    lng: Annotated[float | None, Query(description="Observer longitude")] = None,
    radius: Annotated[float | None, Query(gt=0, description="Search radius in km")] = None,
    status_filter: Annotated[
        str | None, Query(alias="status", description="Filter by status")
    ] = "available",
    priority: Annotated[str | None, Query(description="Filter by priority")] = None,
    limit: Annotated[
        int, Query(ge=1, le=100, description="Maximum rows before radius filter")
    ] = 20,
) -> PickupListResponse:
    """Pickup requests by priority then recency.

    With both ``lat`` and ``lng`` every row carries a distance and travel
    estimate, and rows outside ``radius`` (default 25 km) are left out.
    """
    if (lat is None) != (lng is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="lat and lng must be given together",
        )
    observer = [lat, lng] if lat is not None else None

    try:
        listings = await pickup_service.list_pickup_requests(
            db,
            observer=observer,
            radius_km=radius,
            status=status_filter,
            priority=priority,
            limit=limit,
        )
    except DomainError as e:
        raise domain_http_error(e) from None
    return PickupListResponse(count=len(listings), requests=listings)


@router.get(
    "/my-pickups",
    response_model=PickupListResponse,
    summary="List my assigned pickups",
)
async def list_my_pickups(
    volunteer: Annotated[User, Depends(require_permission("view_own_pickups"))],
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: Annotated[
        str | None, Query(alias="status", description="Filter by status")
    ] = None,
) -> PickupListResponse:
    """Pickup requests bound to the calling volunteer, newest first."""
    try:
        listings = await pickup_service.list_volunteer_pickups(db, volunteer.id, status_filter)
    except DomainError as e:
        raise domain_http_error(e) from None
    return PickupListResponse(count=len(listings), requests=listings)


@router.patch(
    "/pickup-requests/{request_id}/status",
    response_model=PickupStatusResponse,
    summary="Update a pickup request's status",
)
async def update_pickup_status(
    request_id: UUID,
    update: PickupStatusUpdate,
    actor: Annotated[User, Depends(require_permission("update_pickup_status"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PickupStatusResponse:
    """Move a pickup request through its lifecycle.

    The paired donation's status follows in the same transaction.
    """
    try:
        pickup_request, donation_status = await lifecycle_service.update_pickup_status(
            db,
            request_id,
            update.status,
            actor.id,
            notes=update.notes,
            actor_is_admin=actor.role == UserRole.ADMIN.value,
        )
    except DomainError as e:
        raise domain_http_error(e) from None
    except SQLAlchemyError as e:
        logger.error(f"Error updating pickup {request_id}: {e}", exc_info=True)
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update the pickup request",
        ) from None
    await db.commit()

    return PickupStatusResponse(
        id=pickup_request.id,
        status=pickup_request.status,
        volunteer_id=pickup_request.volunteer_id,
        donation_status=donation_status.value,
        accepted_at=pickup_request.accepted_at,
        completed_at=pickup_request.completed_at,
        updated_at=pickup_request.updated_at,
    )


@router.get(
    "/my-donations",
    response_model=list[DonationResponse],
    summary="List my donations",
)
async def list_my_donations(
    donor: Annotated[User, Depends(require_permission("view_own_donations"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[Donation]:
    """Donations submitted by the caller, newest first."""
    return await donation_service.list_donor_donations(db, donor.id)


@router.get(
    "/search-addresses",
    response_model=AddressSearchResponse,
    summary="Search addresses",
)
async def search_addresses(
    geocoder: Annotated[GeocodingClient, Depends(get_geocoding_client)],
    q: Annotated[str, Query(description="Free-text address")] = "",
    limit: Annotated[int, Query(ge=1, le=10)] = 5,
) -> AddressSearchResponse:
    """Address autocomplete backed by the external geocoder."""
    try:
        suggestions = await geocoder.search_addresses(q, limit)
    except httpx.HTTPError:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Address search is unavailable",
        ) from None
    return AddressSearchResponse(suggestions=suggestions)


@router.get(
    "/{public_id}",
    response_model=DonationDetailResponse,
    summary="Get a donation",
)
async def get_donation(
    public_id: str,
    user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DonationDetailResponse:
    """Get a donation by its DON- id, with its pickup request."""
    donation = await donation_service.get_donation_by_public_id(db, public_id)
    if not donation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Donation {public_id} not found",
        )
    return DonationDetailResponse(
        donation=DonationResponse.model_validate(donation),
        pickup_request=(
            PickupRequestResponse.model_validate(donation.pickup_request)
            if donation.pickup_request
            else None
        ),
    )
