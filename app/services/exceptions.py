"""Domain errors raised by the service layer.

Routers translate these into HTTP responses using ``status_code``; nothing
is mutated when one of them is raised.
"""

from fastapi import status


class DomainError(Exception):
    """Base class for errors the caller can act on."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Input was well-formed JSON but semantically invalid."""


class InvalidCoordinatesError(ValidationError, ValueError):
    """Coordinate pair missing or out of range."""


class InvalidStatusError(ValidationError):
    """Status string is not one of the known values."""


class ConfirmationError(ValidationError):
    """Donation cannot be confirmed in its current state."""


class ScheduleNotSetError(ValidationError):
    """Operation needs an availability schedule the volunteer has not set."""


class NotAuthorizedError(DomainError):
    """Caller does not own the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DomainError):
    """Resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class PickupRequestNotFoundError(NotFoundError):
    """Pickup request id is unknown."""


class DonationNotFoundError(NotFoundError):
    """Donation id is unknown."""


class CharityNotFoundError(NotFoundError):
    """Charity id is unknown."""


class AvailabilityNotFoundError(NotFoundError):
    """Volunteer has no availability schedule."""
