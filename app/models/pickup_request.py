"""PickupRequest model - logistics record for collecting and delivering one donation."""

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, JSONType, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.donation import Donation
    from app.models.user import User


class PickupStatus(str, Enum):
    """Pickup request status enum."""

    AVAILABLE = "available"
    ACCEPTED = "accepted"
    EN_ROUTE_PICKUP = "en_route_pickup"
    ARRIVED_PICKUP = "arrived_pickup"
    PICKED_UP = "picked_up"
    EN_ROUTE_DELIVERY = "en_route_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PickupPriority(str, Enum):
    """Pickup priority enum."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PickupRequest(Base, UUIDMixin, TimestampMixin):
    """One pickup request per donation, created together with it."""

    __tablename__ = "pickup_requests"
    __table_args__ = (
        Index("ix_pickup_status_priority", "status", "priority"),
        Index("ix_pickup_status_created_at", "status", "created_at"),
        Index("ix_pickup_volunteer_status", "volunteer_id", "status"),
        Index("ix_pickup_charity_id", "charity_id"),
    )

    donation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("donations.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    charity_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    volunteer_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,  # null while available
    )

    pickup_address: Mapped[str] = mapped_column(Text, nullable=False)
    # [lat, lon] - NOT GeoJSON order, see app.services.geo
    pickup_coordinates: Mapped[list[float]] = mapped_column(JSONType, nullable=False)
    delivery_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    contact_person: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Snapshot of the donation's items at submission time
    items: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    priority: Mapped[str] = mapped_column(
        String(10), nullable=False, default=PickupPriority.MEDIUM.value
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PickupStatus.AVAILABLE.value
    )

    # Set once; see app.services.pickup_lifecycle
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # {access_notes, total_weight, requires_refrigeration, fragile_items,
    #  contact_preference, additional_notes}
    request_metadata: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    status_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    donation: Mapped["Donation"] = relationship("Donation", back_populates="pickup_request")
    charity: Mapped["User"] = relationship("User", foreign_keys=[charity_id])
    volunteer: Mapped["User | None"] = relationship("User", foreign_keys=[volunteer_id])

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<PickupRequest(id={self.id}, status='{self.status}', "
            f"priority='{self.priority}', volunteer_id={self.volunteer_id})>"
        )
