"""Pydantic schemas for Donation."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models import ContactPreference, ItemCondition, UrgencyLevel
from app.schemas.availability import TIME_PATTERN
from app.schemas.pickup_request import PickupRequestResponse


class DonationItem(BaseModel):
    """One line of a donation."""

    category: str = Field(..., min_length=1, max_length=100, examples=["Food items"])
    description: str = Field(..., min_length=1, max_length=500)
    quantity: str = Field(..., min_length=1, max_length=100, examples=["3 bags"])
    condition: ItemCondition


# Schema for submitting a donation
class DonationCreate(BaseModel):
    """Schema for submitting a new donation.

    ``pickup_coordinates`` is ``[latitude, longitude]``; it is checked by the
    service so that out-of-range values are reported as a 400.
    """

    charity_id: UUID = Field(..., description="Receiving charity (user id)")
    donor_name: str | None = Field(None, max_length=255)
    donor_phone: str | None = Field(None, max_length=20)
    donor_email: str | None = Field(None, max_length=255)
    organization_name: str | None = Field(None, max_length=255)
    organization_type: str = Field(
        "individual", description="individual, business, organization, school, restaurant"
    )
    pickup_address: str = Field(..., min_length=1)
    pickup_coordinates: list[float] = Field(
        ..., description="[latitude, longitude]", examples=[[-1.2921, 36.8219]]
    )
    access_notes: str | None = Field(None, max_length=1000)
    items: list[DonationItem] = Field(..., min_length=1)
    total_weight: str | None = Field(None, max_length=50)
    requires_refrigeration: bool = False
    fragile_items: bool = False
    delivery_instructions: str | None = Field(None, max_length=1000)
    availability_type: str = Field("flexible", description="flexible, specific, urgent")
    preferred_date: date | None = None
    preferred_time_start: str | None = Field(None, pattern=TIME_PATTERN)
    preferred_time_end: str | None = Field(None, pattern=TIME_PATTERN)
    urgency_level: UrgencyLevel = UrgencyLevel.MEDIUM
    additional_notes: str | None = Field(None, max_length=1000)
    photo_consent: bool = False
    contact_preference: ContactPreference = ContactPreference.PHONE

    @field_validator("organization_type")
    @classmethod
    def validate_organization_type(cls, v: str) -> str:
        """Validate organization type."""
        valid_types = {"individual", "business", "organization", "school", "restaurant"}
        if v not in valid_types:
            raise ValueError(f"organization_type must be one of: {', '.join(sorted(valid_types))}")
        return v

    @field_validator("availability_type")
    @classmethod
    def validate_availability_type(cls, v: str) -> str:
        """Validate availability type."""
        valid_types = {"flexible", "specific", "urgent"}
        if v not in valid_types:
            raise ValueError(f"availability_type must be one of: {', '.join(sorted(valid_types))}")
        return v


# Schema for the charity's confirmation
class DonationConfirm(BaseModel):
    """Thank-you note supplied when confirming receipt."""

    thank_you_note: str | None = Field(None, max_length=2000)


# Response schemas
class DonationResponse(BaseModel):
    """Schema for donation responses."""

    id: UUID
    public_id: str
    donor_id: UUID | None
    charity_id: UUID
    donor_name: str
    donor_phone: str
    donor_email: str | None
    organization_name: str | None
    organization_type: str
    pickup_address: str
    pickup_coordinates: list[float] = Field(..., description="[latitude, longitude]")
    access_notes: str | None
    items: list[dict]
    total_weight: str | None
    requires_refrigeration: bool
    fragile_items: bool
    delivery_instructions: str | None
    availability_type: str
    preferred_date: date | None
    preferred_time_start: str | None
    preferred_time_end: str | None
    urgency_level: str
    additional_notes: str | None
    photo_consent: bool
    contact_preference: str
    status: str
    thank_you_note: str | None
    confirmed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DonationDetailResponse(BaseModel):
    """A donation together with its pickup request."""

    donation: DonationResponse
    pickup_request: PickupRequestResponse | None


class DonationSubmitResponse(DonationDetailResponse):
    """Result of a donation submission."""

    submission_id: str
    message: str


class DonationListResponse(BaseModel):
    """Paginated donation list."""

    count: int
    total: int
    pages: int
    data: list[DonationResponse]


class DonationConfirmResponse(BaseModel):
    """Result of a confirmation."""

    id: UUID
    status: str
    thank_you_note: str
    confirmed_at: datetime
    message: str


class AddressSuggestion(BaseModel):
    """One geocoder match."""

    display_name: str
    coordinates: list[float] = Field(..., description="[latitude, longitude]")
    type: str | None = None
    importance: float = 0
    address_components: dict[str, str | None] = Field(default_factory=dict)


class AddressSearchResponse(BaseModel):
    """Address autocomplete result."""

    suggestions: list[AddressSuggestion]
