"""Donation model - the donor-facing record of items offered."""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, JSONType, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.pickup_request import PickupRequest
    from app.models.user import User


class DonationStatus(str, Enum):
    """Donation status enum.

    Everything but CONFIRMED is projected from the pickup request status.
    """

    SUBMITTED = "submitted"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    DELIVERED = "delivered"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class UrgencyLevel(str, Enum):
    """Urgency as chosen by the donor; copied to the pickup request as priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ItemCondition(str, Enum):
    """Condition of a donated item."""

    NEW = "new"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ContactPreference(str, Enum):
    """How the donor wants to be contacted."""

    PHONE = "phone"
    EMAIL = "email"
    SMS = "sms"


class Donation(Base, UUIDMixin, TimestampMixin):
    """Items offered by a donor to a charity."""

    __tablename__ = "donations"
    __table_args__ = (
        Index("ix_donation_status_urgency", "status", "urgency_level"),
        Index("ix_donation_charity_id", "charity_id"),
        Index("ix_donation_donor_id", "donor_id"),
    )

    # Human-facing id, e.g. DON-1717000000000
    public_id: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    donor_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    charity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    donor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    donor_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    donor_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    organization_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    organization_type: Mapped[str] = mapped_column(
        String(30), nullable=False, default="individual"
    )

    pickup_address: Mapped[str] = mapped_column(Text, nullable=False)
    # [lat, lon] - NOT GeoJSON order, see app.services.geo
    pickup_coordinates: Mapped[list[float]] = mapped_column(JSONType, nullable=False)
    access_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # [{category, description, quantity, condition}]
    items: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    total_weight: Mapped[str | None] = mapped_column(String(50), nullable=True)
    requires_refrigeration: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fragile_items: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    delivery_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    availability_type: Mapped[str] = mapped_column(String(20), nullable=False, default="flexible")
    preferred_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    preferred_time_start: Mapped[str | None] = mapped_column(String(5), nullable=True)
    preferred_time_end: Mapped[str | None] = mapped_column(String(5), nullable=True)
    urgency_level: Mapped[str] = mapped_column(
        String(10), nullable=False, default=UrgencyLevel.MEDIUM.value
    )
    additional_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_consent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    contact_preference: Mapped[str] = mapped_column(
        String(10), nullable=False, default=ContactPreference.PHONE.value
    )

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DonationStatus.SUBMITTED.value, index=True
    )
    thank_you_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    donor: Mapped["User | None"] = relationship("User", foreign_keys=[donor_id])
    charity: Mapped["User"] = relationship("User", foreign_keys=[charity_id])
    pickup_request: Mapped["PickupRequest | None"] = relationship(
        "PickupRequest", back_populates="donation", uselist=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Donation(id={self.id}, public_id='{self.public_id}', status='{self.status}')>"
