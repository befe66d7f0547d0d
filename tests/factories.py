"""Builders for test data shared across test modules."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Donation, PickupRequest, User, UserRole
from app.utils.jwt import create_access_token

# Nairobi CBD; the [lat, lon] order is used everywhere
NAIROBI = [-1.2921, 36.8219]


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header for a user."""
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


def minutes_ago(minutes: int) -> datetime:
    """An aware UTC timestamp ``minutes`` in the past."""
    return datetime.now(timezone.utc) - timedelta(minutes=minutes)


def point_north_of(origin: list[float], km: float) -> list[float]:
    """A point ``km`` due north of ``origin`` (one degree of latitude is ~111.19 km)."""
    return [origin[0] + km / 111.195, origin[1]]


async def make_user(
    db: AsyncSession,
    role: UserRole,
    name: str,
    location: list[float] | None = None,
    **kwargs,
) -> User:
    """Create a user of any role."""
    user = User(
        id=uuid4(),
        name=name,
        email=f"{name.lower().replace(' ', '.')}.{uuid4().hex[:6]}@example.org",
        role=role.value,
        phone_number=kwargs.pop("phone_number", "+254700000000"),
        location=location,
        **kwargs,
    )
    db.add(user)
    await db.flush()
    return user


async def make_pickup(
    db: AsyncSession,
    charity: User,
    coordinates: list[float] | None = None,
    priority: str = "medium",
    status: str = "available",
    created_at: datetime | None = None,
    donor: User | None = None,
    volunteer: User | None = None,
) -> PickupRequest:
    """Create a donation and its pickup request directly."""
    coordinates = coordinates if coordinates is not None else NAIROBI
    created_at = created_at or datetime.now(timezone.utc)
    donation = Donation(
        id=uuid4(),
        public_id=f"DON-{uuid4().int % 10**13}",
        donor_id=donor.id if donor else None,
        charity_id=charity.id,
        donor_name=donor.name if donor else "Walk-in Donor",
        donor_phone="+254711111111",
        donor_email=donor.email if donor else None,
        pickup_address="Kenyatta Avenue",
        pickup_coordinates=coordinates,
        items=[
            {"category": "Clothing", "description": "Jackets", "quantity": "4", "condition": "good"}
        ],
        urgency_level=priority,
        created_at=created_at,
    )
    db.add(donation)
    await db.flush()

    pickup = PickupRequest(
        id=uuid4(),
        donation_id=donation.id,
        charity_id=charity.id,
        volunteer_id=volunteer.id if volunteer else None,
        pickup_address="Kenyatta Avenue",
        pickup_coordinates=coordinates,
        contact_person=donation.donor_name,
        contact_phone=donation.donor_phone,
        items=donation.items,
        priority=priority,
        status=status,
        submitted_at=created_at,
        created_at=created_at,
    )
    db.add(pickup)
    await db.flush()
    return pickup
