"""Tests for donation submission, listing and charity confirmation."""

from datetime import date, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import DonationStatus, PickupRequest, User, UserRole
from app.schemas.donation import DonationCreate
from app.services.donations import (
    confirm_donation,
    get_donation_by_public_id,
    list_charity_donations,
    list_donor_donations,
    page_count,
    submit_donation,
)
from app.services.exceptions import (
    CharityNotFoundError,
    ConfirmationError,
    DonationNotFoundError,
    InvalidCoordinatesError,
    NotAuthorizedError,
    ValidationError,
)
from app.services.pickup_lifecycle import update_pickup_status
from tests.factories import NAIROBI, make_pickup, make_user, minutes_ago


def donation_payload(charity: User, **overrides) -> DonationCreate:
    data = {
        "charity_id": str(charity.id),
        "pickup_address": "Moi Avenue, Nairobi",
        "pickup_coordinates": NAIROBI,
        "items": [
            {
                "category": "Food items",
                "description": "Maize flour",
                "quantity": "3 bags",
                "condition": "new",
            }
        ],
        "urgency_level": "high",
        "total_weight": "30kg",
        "fragile_items": True,
    }
    data.update(overrides)
    return DonationCreate.model_validate(data)


class TestSubmitDonation:
    """Tests for submit_donation."""

    async def test_creates_donation_and_pickup(
        self, db: AsyncSession, donor: User, charity: User
    ):
        """Both records are created and linked."""
        donation, pickup = await submit_donation(db, donor, donation_payload(charity))

        assert donation.public_id.startswith("DON-")
        assert donation.status == DonationStatus.SUBMITTED.value
        assert donation.donor_name == donor.name
        assert donation.donor_phone == donor.phone_number
        assert donation.urgency_level == "high"

        assert pickup.donation_id == donation.id
        assert pickup.status == "available"
        assert pickup.priority == "high"
        assert pickup.volunteer_id is None
        assert pickup.pickup_coordinates == NAIROBI
        assert pickup.items == donation.items
        assert pickup.delivery_address == "Ngong Road, Nairobi"
        assert pickup.submitted_at is not None
        assert pickup.request_metadata["total_weight"] == "30kg"
        assert pickup.request_metadata["fragile_items"] is True

    async def test_public_ids_are_unique(self, db: AsyncSession, donor: User, charity: User):
        """Two submissions in the same millisecond still get distinct ids."""
        first, _ = await submit_donation(db, donor, donation_payload(charity))
        second, _ = await submit_donation(db, donor, donation_payload(charity))
        assert first.public_id != second.public_id

    async def test_unknown_charity(self, db: AsyncSession, donor: User, charity: User):
        """Charity must exist."""
        payload = donation_payload(charity, charity_id=str(uuid4()))
        with pytest.raises(CharityNotFoundError):
            await submit_donation(db, donor, payload)

    async def test_non_charity_recipient(self, db: AsyncSession, donor: User, volunteer: User):
        """A user with another role is not a charity."""
        with pytest.raises(CharityNotFoundError):
            await submit_donation(db, donor, donation_payload(volunteer))

    async def test_invalid_coordinates(self, db: AsyncSession, donor: User, charity: User):
        """Out-of-range pickup coordinates are rejected."""
        with pytest.raises(InvalidCoordinatesError):
            await submit_donation(
                db, donor, donation_payload(charity, pickup_coordinates=[-100, 36.8])
            )

    async def test_phone_required(self, db: AsyncSession, charity: User):
        """A donor without a phone must supply one."""
        no_phone = await make_user(db, UserRole.DONOR, "No Phone", phone_number=None)

        with pytest.raises(ValidationError):
            await submit_donation(db, no_phone, donation_payload(charity))

        donation, _ = await submit_donation(
            db, no_phone, donation_payload(charity, donor_phone="+254722000000")
        )
        assert donation.donor_phone == "+254722000000"

    async def test_lookup_by_public_id(self, db: AsyncSession, donor: User, charity: User):
        """The DON- id finds the donation with its pickup request."""
        donation, pickup = await submit_donation(db, donor, donation_payload(charity))

        found = await get_donation_by_public_id(db, donation.public_id)

        assert found.id == donation.id
        assert found.pickup_request.id == pickup.id
        assert await get_donation_by_public_id(db, "DON-0") is None


class TestListDonations:
    """Tests for donor and charity listings."""

    async def test_donor_sees_own(self, db: AsyncSession, donor: User, charity: User):
        """Donors see their own donations only."""
        await make_pickup(db, charity)
        mine = await make_pickup(db, charity, donor=donor)

        donations = await list_donor_donations(db, donor.id)

        assert [d.id for d in donations] == [mine.donation_id]

    async def test_charity_pagination(self, db: AsyncSession, charity: User):
        """Pages are newest first and report the total."""
        for minutes in range(5):
            await make_pickup(db, charity, created_at=minutes_ago(minutes))

        page, total = await list_charity_donations(db, charity.id, skip=2, limit=2)

        assert total == 5
        assert len(page) == 2
        assert page[0].created_at > page[1].created_at
        assert page_count(total, 2) == 3

    async def test_charity_filters(self, db: AsyncSession, charity: User, donor: User):
        """Status, urgency and donor name filters combine."""
        await make_pickup(db, charity, priority="low")
        wanted = await make_pickup(db, charity, priority="high", donor=donor)

        page, total = await list_charity_donations(
            db, charity.id, urgency="high", donor_name="wanjiku", status="submitted"
        )

        assert total == 1
        assert page[0].id == wanted.donation_id

    async def test_charity_date_filter(self, db: AsyncSession, charity: User):
        """start/end dates bound created_at."""
        await make_pickup(db, charity)
        later = date.today() + timedelta(days=2)

        _, total = await list_charity_donations(db, charity.id, start_date=later)

        assert total == 0

    async def test_other_charity_not_listed(self, db: AsyncSession, charity: User):
        """Charities see only donations addressed to them."""
        other = await make_user(db, UserRole.CHARITY, "Other Charity")
        await make_pickup(db, other)

        _, total = await list_charity_donations(db, charity.id)

        assert total == 0


class TestConfirmDonation:
    """Tests for confirm_donation."""

    async def deliver(self, db: AsyncSession, charity: User, volunteer: User):
        pickup = await make_pickup(db, charity)
        await update_pickup_status(db, pickup.id, "accepted", volunteer.id)
        await update_pickup_status(db, pickup.id, "delivered", volunteer.id)
        return pickup

    async def test_confirm_delivered(self, db: AsyncSession, charity: User, volunteer: User):
        """A delivered donation can be confirmed with a note."""
        pickup = await self.deliver(db, charity, volunteer)

        donation = await confirm_donation(
            db, pickup.donation_id, charity.id, "  Thank you so much!  "
        )

        assert donation.status == DonationStatus.CONFIRMED.value
        assert donation.thank_you_note == "  Thank you so much!  "
        assert donation.confirmed_at is not None

    async def test_confirm_leaves_pickup_alone(
        self, db: AsyncSession, charity: User, volunteer: User
    ):
        """Confirmation does not touch the pickup request."""
        pickup = await self.deliver(db, charity, volunteer)
        await confirm_donation(db, pickup.donation_id, charity.id, "Asante")

        result = await db.execute(
            select(PickupRequest.status).where(PickupRequest.id == pickup.id)
        )
        assert result.scalar_one() == "delivered"

    async def test_not_yet_delivered(self, db: AsyncSession, charity: User, volunteer: User):
        """Only delivered donations can be confirmed."""
        pickup = await make_pickup(db, charity)
        await update_pickup_status(db, pickup.id, "picked_up", volunteer.id)

        with pytest.raises(ConfirmationError) as exc_info:
            await confirm_donation(db, pickup.donation_id, charity.id, "Thanks")

        assert "picked_up" in exc_info.value.message
        assert exc_info.value.status_code == 400

    async def test_second_confirm_fails(self, db: AsyncSession, charity: User, volunteer: User):
        """A donation is confirmed at most once."""
        pickup = await self.deliver(db, charity, volunteer)
        await confirm_donation(db, pickup.donation_id, charity.id, "First")

        with pytest.raises(ConfirmationError, match="already been confirmed"):
            await confirm_donation(db, pickup.donation_id, charity.id, "Second")

    @pytest.mark.parametrize("note", [None, "", "   \n\t"])
    async def test_blank_note(self, db: AsyncSession, charity: User, volunteer: User, note):
        """The note must contain something besides whitespace."""
        pickup = await self.deliver(db, charity, volunteer)

        with pytest.raises(ConfirmationError, match="note is required"):
            await confirm_donation(db, pickup.donation_id, charity.id, note)

    async def test_blank_note_checked_first(self, db: AsyncSession, charity: User):
        """A blank note is reported even for an unknown donation."""
        with pytest.raises(ConfirmationError):
            await confirm_donation(db, uuid4(), charity.id, " ")

    async def test_unknown_donation(self, db: AsyncSession, charity: User):
        """A missing donation is a 404."""
        with pytest.raises(DonationNotFoundError):
            await confirm_donation(db, uuid4(), charity.id, "Thanks")

    async def test_wrong_charity(self, db: AsyncSession, charity: User, volunteer: User):
        """Only the receiving charity may confirm."""
        pickup = await self.deliver(db, charity, volunteer)
        other = await make_user(db, UserRole.CHARITY, "Other Charity")

        with pytest.raises(NotAuthorizedError):
            await confirm_donation(db, pickup.donation_id, other.id, "Thanks")
