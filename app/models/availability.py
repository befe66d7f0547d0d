"""Availability model - a volunteer's declared windows of eligibility for pickups."""

import uuid
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, JSONType, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.user import User


class AvailabilityType(str, Enum):
    """Which sub-structure of the schedule is authoritative."""

    RECURRING_WEEKLY = "recurring_weekly"
    SPECIFIC_DATES = "specific_dates"
    DATE_RANGE = "date_range"
    ALWAYS_AVAILABLE = "always_available"


class VolunteerAvailability(Base, UUIDMixin, TimestampMixin):
    """One schedule per volunteer.

    Only the sub-structure matching ``type`` is read by the resolver; the
    other JSON columns may hold leftovers from an earlier shape and are
    ignored. Use ``app.services.availability.schedule_from_record`` to get the
    typed view.
    """

    __tablename__ = "volunteer_availability"
    __table_args__ = (
        Index("ix_volunteer_availability_type_active", "type", "is_active"),
    )

    volunteer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False)

    # [{day_of_week, time_slots: [{start_time, end_time}]}], 0=Sunday
    recurring_schedule: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    # [{date: "YYYY-MM-DD", time_slots: [...]}]
    specific_dates: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    # {start_date, end_date, days_of_week: [...], time_slots: [...]}
    date_range: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    # Applied every day for always_available; empty = 24/7
    general_time_slots: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    # [{start_date, end_date, reason}] - overrides every shape
    temporary_unavailability: Mapped[list] = mapped_column(
        JSONType, nullable=False, default=list
    )
    # {max_pickups_per_day, transportation_mode}
    preferences: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    volunteer: Mapped["User"] = relationship("User", back_populates="availability")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<VolunteerAvailability(id={self.id}, volunteer_id={self.volunteer_id}, "
            f"type='{self.type}', is_active={self.is_active})>"
        )
