"""Pydantic schemas for volunteer availability.

A schedule is one of four shapes selected by ``type``. Each shape is its own
model carrying only its own sub-structure, so code holding a
``RecurringWeeklySchedule`` cannot accidentally read ``specific_dates``.
"""

import datetime as dt
from datetime import date, datetime, time
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.models import TransportationMode

# Same pattern the mobile app validates against: H:MM or HH:MM, 24h clock
TIME_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class TimeSlot(BaseModel):
    """A same-day window ``[start_time, end_time)`` in local wall-clock time.

    Slots are compared as zero-padded "HH:MM" strings, so a slot that crosses
    midnight (22:00-02:00) never matches anything.
    """

    start_time: str = Field(..., pattern=TIME_PATTERN, examples=["09:00"])
    end_time: str = Field(..., pattern=TIME_PATTERN, examples=["17:00"])

    @field_validator("start_time", "end_time")
    @classmethod
    def zero_pad(cls, v: str) -> str:
        """Normalise "9:00" to "09:00" so string comparison orders correctly."""
        hours, minutes = v.split(":")
        return f"{int(hours):02d}:{minutes}"

    def contains(self, time_of_day: str) -> bool:
        """Whether an "HH:MM" time falls inside the slot."""
        return self.start_time <= time_of_day < self.end_time


class RecurringDay(BaseModel):
    """Slots for one day of the week (0=Sunday ... 6=Saturday)."""

    day_of_week: int = Field(..., ge=0, le=6, examples=[1])
    time_slots: list[TimeSlot] = Field(default_factory=list)


class SpecificDate(BaseModel):
    """Slots for one calendar date."""

    date: dt.date = Field(..., examples=["2024-12-25"])
    time_slots: list[TimeSlot] = Field(default_factory=list)


class DateRange(BaseModel):
    """Slots applied on allowed weekdays between two dates (both inclusive)."""

    start_date: date = Field(..., examples=["2024-11-01"])
    end_date: date = Field(..., examples=["2024-11-30"])
    days_of_week: list[Annotated[int, Field(ge=0, le=6)]] = Field(
        default_factory=list, description="Empty = every day of the week"
    )
    time_slots: list[TimeSlot] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        """Ensure the range is not inverted."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class TemporaryUnavailability(BaseModel):
    """An override window during which the volunteer is never available.

    Bounds are inclusive. A bare date for ``end_date`` means the whole day.
    """

    start_date: datetime
    end_date: datetime
    reason: str | None = Field(None, max_length=255)

    @field_validator("start_date", mode="before")
    @classmethod
    def start_of_day(cls, v):
        """Expand a bare date to midnight."""
        if isinstance(v, str) and len(v) == 10:
            v = date.fromisoformat(v)
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v

    @field_validator("end_date", mode="before")
    @classmethod
    def end_of_day(cls, v):
        """Expand a bare date to the last moment of that day."""
        if isinstance(v, str) and len(v) == 10:
            v = date.fromisoformat(v)
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.max)
        return v

    @model_validator(mode="after")
    def validate_order(self) -> "TemporaryUnavailability":
        """Ensure the window is not inverted."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class Preferences(BaseModel):
    """Volunteer preferences. Stored and returned, not enforced by matching."""

    max_pickups_per_day: int = Field(3, ge=1)
    transportation_mode: TransportationMode = TransportationMode.CAR


class ScheduleBase(BaseModel):
    """Fields shared by every schedule shape."""

    is_active: bool = True
    temporary_unavailability: list[TemporaryUnavailability] = Field(default_factory=list)
    preferences: Preferences = Field(default_factory=Preferences)
    notes: str | None = Field(None, max_length=500)


class RecurringWeeklySchedule(ScheduleBase):
    """Same slots every week on the listed weekdays."""

    type: Literal["recurring_weekly"] = "recurring_weekly"
    recurring_schedule: list[RecurringDay]


class SpecificDatesSchedule(ScheduleBase):
    """Only on the listed calendar dates."""

    type: Literal["specific_dates"] = "specific_dates"
    specific_dates: list[SpecificDate]


class DateRangeSchedule(ScheduleBase):
    """Between two dates, on allowed weekdays."""

    type: Literal["date_range"] = "date_range"
    date_range: DateRange


class AlwaysAvailableSchedule(ScheduleBase):
    """Every day, optionally limited to general time slots (empty = 24/7)."""

    type: Literal["always_available"] = "always_available"
    general_time_slots: list[TimeSlot] = Field(default_factory=list)


ScheduleVariant = Union[
    RecurringWeeklySchedule,
    SpecificDatesSchedule,
    DateRangeSchedule,
    AlwaysAvailableSchedule,
]

AvailabilitySchedule = Annotated[ScheduleVariant, Field(discriminator="type")]


# Schema for appending a temporary unavailability window
class TemporaryUnavailabilityCreate(TemporaryUnavailability):
    """Schema for adding a temporary unavailability window."""


# Response schema
class AvailabilityResponse(BaseModel):
    """Schema for availability responses (stored shape, all sub-structures)."""

    id: UUID
    volunteer_id: UUID
    type: str
    recurring_schedule: list[dict]
    specific_dates: list[dict]
    date_range: dict | None
    general_time_slots: list[dict]
    temporary_unavailability: list[dict]
    preferences: dict
    is_active: bool
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MyAvailabilityResponse(BaseModel):
    """Own schedule, or null with an explanatory message."""

    data: AvailabilityResponse | None
    message: str | None = None


class TemporaryUnavailabilityListResponse(BaseModel):
    """All override windows after an append."""

    message: str
    data: list[dict]


class AvailabilityCheckRequest(BaseModel):
    """Ask whether the caller is available at a moment."""

    date_time: datetime = Field(..., examples=["2024-11-25T14:30:00Z"])


class AvailabilityCheckResponse(BaseModel):
    """Result of an availability check."""

    available: bool
    date_time: datetime
    message: str | None = None


class FindVolunteersRequest(BaseModel):
    """Find volunteers available for a pickup at a moment."""

    pickup_date_time: datetime = Field(..., examples=["2024-11-25T14:30:00Z"])
    location: list[float] | None = Field(
        None, description="Optional [latitude, longitude] to narrow matches by distance"
    )
    radius_km: float | None = Field(None, gt=0)


class VolunteerSummary(BaseModel):
    """Public volunteer fields returned by matching."""

    id: UUID
    name: str
    email: str
    phone_number: str | None

    model_config = ConfigDict(from_attributes=True)


class VolunteerMatchResponse(BaseModel):
    """One matched volunteer."""

    volunteer: VolunteerSummary
    availability_id: UUID
    preferences: Preferences
    distance_km: float | None = None


class FindVolunteersResponse(BaseModel):
    """Matching result."""

    count: int
    data: list[VolunteerMatchResponse]
