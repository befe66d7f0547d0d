"""Business logic services for GenHands."""

# Service modules are imported individually where needed
# to avoid circular imports

__all__ = [
    "availability",
    "matching",
    "pickups",
    "pickup_lifecycle",
    "donations",
    "geo",
    "geocoding",
    "email",
    "users",
    "permissions",
]
