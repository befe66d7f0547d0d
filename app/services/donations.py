"""Donation service - submission, lookup and charity confirmation."""

import logging
import math
import time
from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models import Donation, DonationStatus, PickupRequest, PickupStatus, User
from app.models.base import utcnow
from app.schemas.donation import DonationCreate
from app.services.exceptions import (
    CharityNotFoundError,
    ConfirmationError,
    DonationNotFoundError,
    NotAuthorizedError,
    ValidationError,
)
from app.services.geo import validate_coordinates
from app.services.users import get_charity

logger = logging.getLogger(__name__)


async def _next_public_id(db: AsyncSession) -> str:
    """``DON-<epoch millis>``, bumped past any id already taken."""
    millis = int(time.time() * 1000)
    while True:
        public_id = f"DON-{millis}"
        taken = await db.execute(select(Donation.id).where(Donation.public_id == public_id))
        if taken.scalar_one_or_none() is None:
            return public_id
        millis += 1


async def submit_donation(
    db: AsyncSession, donor: User, donation_data: DonationCreate
) -> tuple[Donation, PickupRequest]:
    """Create a donation and its pickup request together.

    The pickup request starts ``available`` with a snapshot of the items and
    the donation's urgency as its priority.
    """
    lat, lon = validate_coordinates(donation_data.pickup_coordinates)

    charity = await get_charity(db, donation_data.charity_id)
    if charity is None:
        raise CharityNotFoundError(f"Charity {donation_data.charity_id} not found")

    donor_phone = donor.phone_number or donation_data.donor_phone
    if not donor_phone:
        raise ValidationError("A contact phone number is required")

    items = [item.model_dump(mode="json") for item in donation_data.items]
    coordinates = [lat, lon]
    submitted_at = utcnow()

    donation = Donation(
        public_id=await _next_public_id(db),
        donor_id=donor.id,
        charity_id=charity.id,
        donor_name=donor.name,
        donor_phone=donor_phone,
        donor_email=donor.email,
        organization_name=donation_data.organization_name,
        organization_type=donation_data.organization_type,
        pickup_address=donation_data.pickup_address,
        pickup_coordinates=coordinates,
        access_notes=donation_data.access_notes,
        items=items,
        total_weight=donation_data.total_weight,
        requires_refrigeration=donation_data.requires_refrigeration,
        fragile_items=donation_data.fragile_items,
        delivery_instructions=donation_data.delivery_instructions,
        availability_type=donation_data.availability_type,
        preferred_date=donation_data.preferred_date,
        preferred_time_start=donation_data.preferred_time_start,
        preferred_time_end=donation_data.preferred_time_end,
        urgency_level=donation_data.urgency_level.value,
        additional_notes=donation_data.additional_notes,
        photo_consent=donation_data.photo_consent,
        contact_preference=donation_data.contact_preference.value,
        status=DonationStatus.SUBMITTED.value,
    )
    db.add(donation)
    await db.flush()

    profile = charity.charity_profile
    pickup_request = PickupRequest(
        donation_id=donation.id,
        charity_id=charity.id,
        pickup_address=donation_data.pickup_address,
        pickup_coordinates=coordinates,
        delivery_address=charity.address or (profile.charity_name if profile else charity.name),
        contact_person=donor.name,
        contact_phone=donor_phone,
        contact_email=donor.email,
        items=items,
        priority=donation_data.urgency_level.value,
        status=PickupStatus.AVAILABLE.value,
        submitted_at=submitted_at,
        request_metadata={
            "access_notes": donation_data.access_notes,
            "total_weight": donation_data.total_weight,
            "requires_refrigeration": donation_data.requires_refrigeration,
            "fragile_items": donation_data.fragile_items,
            "contact_preference": donation_data.contact_preference.value,
            "additional_notes": donation_data.additional_notes,
        },
    )
    db.add(pickup_request)
    await db.flush()
    await db.refresh(donation)
    await db.refresh(pickup_request)

    logger.info(
        f"Donation {donation.public_id} submitted by {donor.id} for charity {charity.id} "
        f"(pickup {pickup_request.id}, priority {pickup_request.priority})"
    )
    return donation, pickup_request


async def get_donation(db: AsyncSession, donation_id: UUID) -> Donation | None:
    """Get donation by ID."""
    result = await db.execute(select(Donation).where(Donation.id == donation_id))
    return result.scalar_one_or_none()


async def get_donation_by_public_id(db: AsyncSession, public_id: str) -> Donation | None:
    """Get donation by its DON- id, with the pickup request loaded."""
    result = await db.execute(
        select(Donation)
        .where(Donation.public_id == public_id)
        .options(selectinload(Donation.pickup_request))
    )
    return result.scalar_one_or_none()


async def list_donor_donations(db: AsyncSession, donor_id: UUID) -> list[Donation]:
    """A donor's donations, newest first."""
    result = await db.execute(
        select(Donation).where(Donation.donor_id == donor_id).order_by(Donation.created_at.desc())
    )
    return list(result.scalars().all())


async def list_charity_donations(
    db: AsyncSession,
    charity_id: UUID,
    status: str | None = None,
    urgency: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    donor_name: str | None = None,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[Donation], int]:
    """Donations addressed to a charity, newest first. Returns (page, total)."""
    query = select(Donation).where(Donation.charity_id == charity_id)

    if status:
        query = query.where(Donation.status == status)

    if urgency:
        query = query.where(Donation.urgency_level == urgency)

    if start_date:
        start_dt = datetime.combine(start_date, datetime.min.time(), tzinfo=timezone.utc)
        query = query.where(Donation.created_at >= start_dt)

    if end_date:
        end_dt = datetime.combine(end_date, datetime.max.time(), tzinfo=timezone.utc)
        query = query.where(Donation.created_at <= end_dt)

    if donor_name:
        query = query.where(Donation.donor_name.ilike(f"%{donor_name}%"))

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(
        query.order_by(Donation.created_at.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


async def confirm_donation(
    db: AsyncSession, donation_id: UUID, charity_id: UUID, thank_you_note: str | None
) -> Donation:
    """Charity confirms receipt of a delivered donation.

    The note is stored as supplied; it only has to contain something other
    than whitespace. Only the receiving charity may confirm, and only once
    the donation is ``delivered``, which also rules out confirming twice.
    """
    if not thank_you_note or not thank_you_note.strip():
        raise ConfirmationError("Thank you note is required.")

    donation = await get_donation(db, donation_id)
    if donation is None:
        raise DonationNotFoundError("Donation not found.")

    if donation.charity_id != charity_id:
        logger.warning(f"Charity {charity_id} tried to confirm donation {donation_id}")
        raise NotAuthorizedError("You are not authorized to confirm this donation.")

    if donation.status == DonationStatus.CONFIRMED.value:
        raise ConfirmationError("This donation has already been confirmed.")

    if donation.status != DonationStatus.DELIVERED.value:
        raise ConfirmationError(
            f"This donation cannot be confirmed yet. Its current status is "
            f"'{donation.status}'. It must be 'delivered' first."
        )

    donation.status = DonationStatus.CONFIRMED.value
    donation.thank_you_note = thank_you_note
    donation.confirmed_at = utcnow()

    await db.flush()
    await db.refresh(donation)

    logger.info(f"Donation {donation.public_id} confirmed by charity {charity_id}")
    return donation
