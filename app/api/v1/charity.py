"""Charity-facing donation endpoints."""

import logging
from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import PaginationParams, domain_http_error, get_db, require_permission
from app.models import User
from app.schemas.donation import (
    DonationConfirm,
    DonationConfirmResponse,
    DonationListResponse,
    DonationResponse,
)
from app.services import donations as donation_service
from app.services.exceptions import DomainError
from app.tasks.notifications import send_thank_you_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/charity", tags=["charity"])


@router.get(
    "/donations",
    response_model=DonationListResponse,
    summary="List incoming donations",
)
async def list_incoming_donations(
    charity: Annotated[User, Depends(require_permission("view_incoming_donations"))],
    db: Annotated[AsyncSession, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends()],
    status: Annotated[str | None, Query(description="Filter by donation status")] = None,
    urgency: Annotated[str | None, Query(description="Filter by urgency level")] = None,
    start_date: Annotated[date | None, Query(description="Created on or after")] = None,
    end_date: Annotated[date | None, Query(description="Created on or before")] = None,
    donor_name: Annotated[str | None, Query(description="Donor name contains")] = None,
) -> DonationListResponse:
    """Donations addressed to the calling charity, newest first."""
    donations, total = await donation_service.list_charity_donations(
        db,
        charity.id,
        status=status,
        urgency=urgency,
        start_date=start_date,
        end_date=end_date,
        donor_name=donor_name,
        skip=pagination.skip,
        limit=pagination.limit,
    )
    return DonationListResponse(
        count=len(donations),
        total=total,
        pages=donation_service.page_count(total, pagination.limit),
        data=[DonationResponse.model_validate(d) for d in donations],
    )


@router.post(
    "/donations/{donation_id}/confirm",
    response_model=DonationConfirmResponse,
    summary="Confirm receipt of a donation",
)
async def confirm_donation(
    donation_id: UUID,
    confirmation: DonationConfirm,
    charity: Annotated[User, Depends(require_permission("confirm_donation"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DonationConfirmResponse:
    """Confirm a delivered donation and thank the donor."""
    try:
        donation = await donation_service.confirm_donation(
            db, donation_id, charity.id, confirmation.thank_you_note
        )
    except DomainError as e:
        raise domain_http_error(e) from None
    await db.commit()

    try:
        send_thank_you_email.delay(str(donation.id))
    except Exception as e:
        # The confirmation stands even if the broker is unreachable
        logger.error(f"Could not queue thank-you email for {donation.public_id}: {e}")

    return DonationConfirmResponse(
        id=donation.id,
        status=donation.status,
        thank_you_note=donation.thank_you_note,
        confirmed_at=donation.confirmed_at,
        message="Donation confirmed and thank you note sent to donor.",
    )
