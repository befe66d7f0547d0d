"""Pydantic schemas for GenHands API."""

from app.schemas.availability import (
    AlwaysAvailableSchedule,
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    AvailabilityResponse,
    AvailabilitySchedule,
    DateRangeSchedule,
    FindVolunteersRequest,
    FindVolunteersResponse,
    RecurringWeeklySchedule,
    SpecificDatesSchedule,
    TemporaryUnavailabilityCreate,
    TimeSlot,
    VolunteerMatchResponse,
)
from app.schemas.donation import (
    AddressSearchResponse,
    DonationConfirm,
    DonationCreate,
    DonationDetailResponse,
    DonationListResponse,
    DonationResponse,
)
from app.schemas.pickup_request import (
    PickupListing,
    PickupRequestResponse,
    PickupStatusUpdate,
)

__all__ = [
    # Availability
    "TimeSlot",
    "AvailabilitySchedule",
    "RecurringWeeklySchedule",
    "SpecificDatesSchedule",
    "DateRangeSchedule",
    "AlwaysAvailableSchedule",
    "TemporaryUnavailabilityCreate",
    "AvailabilityResponse",
    "AvailabilityCheckRequest",
    "AvailabilityCheckResponse",
    "FindVolunteersRequest",
    "FindVolunteersResponse",
    "VolunteerMatchResponse",
    # Donation
    "DonationCreate",
    "DonationConfirm",
    "DonationResponse",
    "DonationDetailResponse",
    "DonationListResponse",
    "AddressSearchResponse",
    # Pickup request
    "PickupStatusUpdate",
    "PickupRequestResponse",
    "PickupListing",
]
