"""User model - one identity record per person, role-specific profiles alongside."""

import uuid
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, JSONType, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.availability import VolunteerAvailability


class UserRole(str, Enum):
    """User role enum."""

    DONOR = "donor"
    VOLUNTEER = "volunteer"
    ADMIN = "admin"
    CHARITY = "charity"


class VerificationStatus(str, Enum):
    """Verification status for volunteers and charities."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    VERIFIED = "verified"
    REJECTED = "rejected"


class TransportationMode(str, Enum):
    """How a volunteer gets around."""

    CAR = "car"
    BICYCLE = "bicycle"
    MOTORCYCLE = "motorcycle"
    PUBLIC_TRANSPORT = "public_transport"
    WALKING = "walking"
    OTHER = "other"


class User(Base, UUIDMixin, TimestampMixin):
    """Identity record shared by donors, volunteers, admins and charities.

    Registration and login live in the auth service; this table is the
    read model the API authorizes against.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    # [lat, lon] - NOT GeoJSON order, see app.services.geo
    location: Mapped[list[float] | None] = mapped_column(JSONType, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    volunteer_profile: Mapped["VolunteerProfile | None"] = relationship(
        "VolunteerProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    charity_profile: Mapped["CharityProfile | None"] = relationship(
        "CharityProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    availability: Mapped["VolunteerAvailability | None"] = relationship(
        "VolunteerAvailability",
        back_populates="volunteer",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class VolunteerProfile(Base, TimestampMixin):
    """Volunteer-only fields, keyed by the user id."""

    __tablename__ = "volunteer_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    transportation_mode: Mapped[str | None] = mapped_column(String(30), nullable=True)
    verification_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=VerificationStatus.PENDING.value
    )
    skills: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    assigned_tasks_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user: Mapped["User"] = relationship("User", back_populates="volunteer_profile")


class CharityProfile(Base, TimestampMixin):
    """Charity-only fields, keyed by the user id."""

    __tablename__ = "charity_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    charity_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    registration_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    verification_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=VerificationStatus.PENDING.value
    )
    needed_categories: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    user: Mapped["User"] = relationship("User", back_populates="charity_profile")

    def __repr__(self) -> str:
        """String representation."""
        return f"<CharityProfile(user_id={self.user_id}, charity_name='{self.charity_name}')>"
