"""Seed sample data for local API testing.

This script creates:
- A charity with its profile
- A donor
- Two volunteers, one with a weekly schedule and one always available
- One submitted donation (and its pickup request)

It prints a bearer token for each user so the endpoints can be exercised
with curl or the /docs page.

Run this after creating the database schema with Alembic.

Usage:
    python scripts/seed_sample_data.py
    python scripts/seed_sample_data.py --clean
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import async_session_factory
from app.models import CharityProfile, User, UserRole, VolunteerProfile
from app.schemas.availability import (
    AlwaysAvailableSchedule,
    Preferences,
    RecurringDay,
    RecurringWeeklySchedule,
    TimeSlot,
)
from app.schemas.donation import DonationCreate, DonationItem
from app.services import availability as availability_service
from app.services import donations as donation_service
from app.utils.jwt import create_access_token

SAMPLE_EMAIL_DOMAIN = "sample.genhands.org"
NAIROBI = [-1.2921, 36.8219]
WESTLANDS = [-1.2676, 36.8108]


async def get_or_create_user(
    db: AsyncSession,
    email: str,
    name: str,
    role: UserRole,
    location: list[float] | None = None,
    address: str | None = None,
) -> tuple[User, bool]:
    """Return (user, created)."""
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        return user, False

    user = User(
        name=name,
        email=email,
        role=role.value,
        phone_number="+254700000000",
        location=location,
        address=address,
        is_verified=True,
    )
    db.add(user)
    await db.flush()
    return user, True


async def seed_data():
    """Seed sample data."""
    async with async_session_factory() as db:
        try:
            print("🌱 Starting sample data seeding...")
            print("=" * 80)

            charity, created = await get_or_create_user(
                db,
                f"charity@{SAMPLE_EMAIL_DOMAIN}",
                "Hope Shelter",
                UserRole.CHARITY,
                location=NAIROBI,
                address="Ngong Road, Nairobi",
            )
            if created:
                db.add(
                    CharityProfile(
                        user_id=charity.id,
                        charity_name="Hope Shelter",
                        category="Shelter",
                        needed_categories=["Clothing", "Food items"],
                    )
                )
                print(f"  ✅ Created charity: {charity.name} (ID: {charity.id})")
            else:
                print(f"✅ Charity already exists: {charity.name} (ID: {charity.id})")

            donor, created = await get_or_create_user(
                db, f"donor@{SAMPLE_EMAIL_DOMAIN}", "Wanjiku Donor", UserRole.DONOR
            )
            print(f"  {'✅ Created' if created else '✅ Found'} donor: {donor.name}")

            weekday_volunteer, created = await get_or_create_user(
                db,
                f"otieno@{SAMPLE_EMAIL_DOMAIN}",
                "Otieno Volunteer",
                UserRole.VOLUNTEER,
                location=WESTLANDS,
            )
            if created:
                db.add(
                    VolunteerProfile(
                        user_id=weekday_volunteer.id, transportation_mode="motorcycle"
                    )
                )
                await db.flush()
                weekdays = [
                    RecurringDay(
                        day_of_week=day,
                        time_slots=[TimeSlot(start_time="09:00", end_time="17:00")],
                    )
                    for day in range(1, 6)
                ]
                await availability_service.set_availability(
                    db,
                    weekday_volunteer.id,
                    RecurringWeeklySchedule(
                        recurring_schedule=weekdays,
                        preferences=Preferences(transportation_mode="motorcycle"),
                    ),
                )
                print(f"  ✅ Created volunteer: {weekday_volunteer.name} (Mon-Fri 09:00-17:00)")

            anytime_volunteer, created = await get_or_create_user(
                db,
                f"akinyi@{SAMPLE_EMAIL_DOMAIN}",
                "Akinyi Volunteer",
                UserRole.VOLUNTEER,
                location=NAIROBI,
            )
            if created:
                db.add(VolunteerProfile(user_id=anytime_volunteer.id, transportation_mode="car"))
                await db.flush()
                await availability_service.set_availability(
                    db, anytime_volunteer.id, AlwaysAvailableSchedule()
                )
                print(f"  ✅ Created volunteer: {anytime_volunteer.name} (always available)")

            admin, _ = await get_or_create_user(
                db, f"admin@{SAMPLE_EMAIL_DOMAIN}", "Sample Admin", UserRole.ADMIN
            )

            existing = await donation_service.list_donor_donations(db, donor.id)
            if existing:
                donation = existing[0]
                print(f"✅ Donation already exists: {donation.public_id}")
            else:
                print("\n📦 Submitting a sample donation")
                donation, pickup_request = await donation_service.submit_donation(
                    db,
                    donor,
                    DonationCreate(
                        charity_id=charity.id,
                        pickup_address="Moi Avenue, Nairobi",
                        pickup_coordinates=[-1.2833, 36.8259],
                        items=[
                            DonationItem(
                                category="Clothing",
                                description="Children's winter jackets",
                                quantity="12",
                                condition="good",
                            )
                        ],
                        urgency_level="high",
                    ),
                )
                print(f"  ✅ Created donation: {donation.public_id}")
                print(f"  🚚 Pickup request: {pickup_request.id} ({pickup_request.status})")

            # Commit all changes
            await db.commit()

            print("\n" + "=" * 80)
            print("✅ Sample data seeding complete!")
            print("=" * 80)
            print("\n🔑 Bearer tokens:")
            for user in (charity, donor, weekday_volunteer, anytime_volunteer, admin):
                token = create_access_token(user.id, user.role)
                print(f"  {user.role:<10} {user.name:<20} {token}")

        except Exception as e:
            print(f"\n❌ Error seeding data: {e}")
            await db.rollback()
            import traceback

            traceback.print_exc()
            sys.exit(1)


async def clean_sample_data():
    """Remove every sample user; donations and schedules cascade."""
    async with async_session_factory() as db:
        try:
            print("🧹 Cleaning sample data...")
            result = await db.execute(
                delete(User).where(User.email.like(f"%@{SAMPLE_EMAIL_DOMAIN}"))
            )
            await db.commit()
            print(f"✅ Removed {result.rowcount} sample users")

        except Exception as e:
            print(f"❌ Error cleaning data: {e}")
            await db.rollback()
            sys.exit(1)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed sample data for local API testing")
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Clean sample data instead of seeding",
    )

    args = parser.parse_args()

    if args.clean:
        asyncio.run(clean_sample_data())
    else:
        asyncio.run(seed_data())
