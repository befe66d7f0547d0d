"""SQLAlchemy models for GenHands."""

from app.models.availability import AvailabilityType, VolunteerAvailability
from app.models.base import Base, TimestampMixin, UUIDMixin
from app.models.donation import (
    ContactPreference,
    Donation,
    DonationStatus,
    ItemCondition,
    UrgencyLevel,
)
from app.models.pickup_request import PickupPriority, PickupRequest, PickupStatus
from app.models.user import (
    CharityProfile,
    TransportationMode,
    User,
    UserRole,
    VerificationStatus,
    VolunteerProfile,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Models
    "User",
    "VolunteerProfile",
    "CharityProfile",
    "VolunteerAvailability",
    "Donation",
    "PickupRequest",
    # Enums
    "UserRole",
    "VerificationStatus",
    "TransportationMode",
    "AvailabilityType",
    "DonationStatus",
    "UrgencyLevel",
    "ItemCondition",
    "ContactPreference",
    "PickupStatus",
    "PickupPriority",
]
