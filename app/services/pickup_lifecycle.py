"""Pickup request lifecycle and its projection onto the paired donation.

available -> accepted -> en_route_pickup -> arrived_pickup -> picked_up
          -> en_route_delivery -> delivered, and cancelled from anywhere.

Transitions are not sequenced: any of the eight statuses may follow any
other. The donation's status is recomputed from the request's on every
transition, in the same transaction.
"""

import logging
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Donation, DonationStatus, PickupRequest, PickupStatus
from app.models.base import utcnow
from app.services.exceptions import (
    InvalidStatusError,
    NotAuthorizedError,
    PickupRequestNotFoundError,
)

logger = logging.getLogger(__name__)

DONATION_STATUS_BY_PICKUP_STATUS: dict[PickupStatus, DonationStatus] = {
    PickupStatus.AVAILABLE: DonationStatus.SUBMITTED,
    PickupStatus.ACCEPTED: DonationStatus.ASSIGNED,
    PickupStatus.EN_ROUTE_PICKUP: DonationStatus.ASSIGNED,
    PickupStatus.ARRIVED_PICKUP: DonationStatus.ASSIGNED,
    PickupStatus.PICKED_UP: DonationStatus.PICKED_UP,
    PickupStatus.EN_ROUTE_DELIVERY: DonationStatus.PICKED_UP,
    PickupStatus.DELIVERED: DonationStatus.DELIVERED,
    PickupStatus.CANCELLED: DonationStatus.CANCELLED,
}


def parse_pickup_status(value: str) -> PickupStatus:
    """Parse a status string, raising InvalidStatusError for unknown values."""
    try:
        return PickupStatus(value)
    except ValueError:
        raise InvalidStatusError(f"Invalid status '{value}'") from None


def project_donation_status(pickup_status: PickupStatus | str) -> DonationStatus:
    """Donation status implied by a pickup request status.

    Never produces ``confirmed``; that is set by the charity separately.
    """
    if not isinstance(pickup_status, PickupStatus):
        pickup_status = parse_pickup_status(pickup_status)
    return DONATION_STATUS_BY_PICKUP_STATUS[pickup_status]


async def get_pickup_request(db: AsyncSession, request_id: UUID) -> PickupRequest | None:
    """Get a pickup request by ID."""
    return await db.get(PickupRequest, request_id)


async def update_pickup_status(
    db: AsyncSession,
    request_id: UUID,
    new_status: str,
    actor_id: UUID,
    notes: str | None = None,
    actor_is_admin: bool = False,
) -> tuple[PickupRequest, DonationStatus]:
    """Move a pickup request to ``new_status`` and project it onto the donation.

    Side effects:
    - ``accepted`` binds the request to ``actor_id``; any later non-cancelled
      status binds it too if nobody holds it yet (never an admin), and
      ``available`` releases it.
    - A donation that is already ``confirmed`` keeps that status.
    - ``accepted_at`` / ``completed_at`` are written only while still NULL.
      The guard is part of the UPDATE statement itself, so a concurrent
      writer that got there first keeps its timestamp.

    Only the volunteer holding a request (or an admin) may move it once it is
    bound. Raises InvalidStatusError, PickupRequestNotFoundError or
    NotAuthorizedError before anything is written.
    """
    target = parse_pickup_status(new_status)

    request = await get_pickup_request(db, request_id)
    if request is None:
        raise PickupRequestNotFoundError(f"Pickup request {request_id} not found")

    if request.volunteer_id is not None and request.volunteer_id != actor_id and not actor_is_admin:
        logger.warning(
            f"User {actor_id} tried to move pickup {request_id} held by {request.volunteer_id}"
        )
        raise NotAuthorizedError("This pickup request is assigned to another volunteer")

    now = utcnow()
    previous_status = request.status
    values: dict = {"status": target.value, "updated_at": now}

    if target == PickupStatus.ACCEPTED:
        values["volunteer_id"] = actor_id
    elif target == PickupStatus.AVAILABLE:
        values["volunteer_id"] = None
    elif target != PickupStatus.CANCELLED and request.volunteer_id is None and not actor_is_admin:
        values["volunteer_id"] = actor_id

    if notes:
        values["status_notes"] = notes

    await db.execute(
        update(PickupRequest).where(PickupRequest.id == request_id).values(**values)
    )

    if target == PickupStatus.ACCEPTED:
        await db.execute(
            update(PickupRequest)
            .where(PickupRequest.id == request_id, PickupRequest.accepted_at.is_(None))
            .values(accepted_at=now)
        )
    elif target == PickupStatus.DELIVERED:
        await db.execute(
            update(PickupRequest)
            .where(PickupRequest.id == request_id, PickupRequest.completed_at.is_(None))
            .values(completed_at=now)
        )

    # confirmed is terminal; later pickup moves leave it alone
    donation_status = project_donation_status(target)
    projected = await db.execute(
        update(Donation)
        .where(
            Donation.id == request.donation_id,
            Donation.status != DonationStatus.CONFIRMED.value,
        )
        .values(status=donation_status.value, updated_at=now)
    )
    if projected.rowcount == 0:
        logger.warning(f"Donation {request.donation_id} already confirmed; status kept")
        donation_status = DonationStatus.CONFIRMED

    await db.flush()
    await db.refresh(request)

    logger.info(
        f"Pickup {request_id}: {previous_status} -> {target.value} "
        f"(donation -> {donation_status.value}) by {actor_id}"
    )
    return request, donation_status
