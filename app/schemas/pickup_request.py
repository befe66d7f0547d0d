"""Pydantic schemas for PickupRequest."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# Schema for a lifecycle transition
class PickupStatusUpdate(BaseModel):
    """Schema for moving a pickup request to a new status.

    ``status`` is a plain string so unknown values are reported as a domain
    validation error (400) rather than a schema error.
    """

    status: str = Field(..., description="Target status", examples=["accepted"])
    notes: str | None = Field(None, max_length=1000, description="Optional status notes")


# Response schemas
class PickupRequestResponse(BaseModel):
    """Schema for pickup request responses."""

    id: UUID
    donation_id: UUID
    charity_id: UUID
    volunteer_id: UUID | None
    pickup_address: str
    pickup_coordinates: list[float] = Field(..., description="[latitude, longitude]")
    delivery_address: str | None
    contact_person: str
    contact_phone: str
    contact_email: str | None
    items: list[dict]
    priority: str
    status: str
    submitted_at: datetime | None
    accepted_at: datetime | None
    completed_at: datetime | None
    metadata: dict = Field(default_factory=dict, validation_alias="request_metadata")
    status_notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PickupListing(PickupRequestResponse):
    """A pickup request as seen by a browsing volunteer."""

    charity_name: str | None = None
    distance_km: float | None = Field(None, description="Great-circle distance from the observer")
    estimated_minutes: int | None = Field(None, description="Advisory travel time at 30 km/h")


class PickupListResponse(BaseModel):
    """Listing result."""

    count: int
    requests: list[PickupListing]


class PickupStatusResponse(BaseModel):
    """Result of a lifecycle transition."""

    id: UUID
    status: str
    volunteer_id: UUID | None
    donation_status: str
    accepted_at: datetime | None
    completed_at: datetime | None
    updated_at: datetime
