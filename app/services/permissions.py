"""Role permissions for GenHands API actions.

Maps each action to the roles that may perform it. Ownership of individual
records (a charity's own donations, a volunteer's own pickups) is checked by
the services; this matrix only answers "may this kind of user try at all".
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.models import User

# Permission Matrix
# Maps action names to list of roles that can perform that action
PERMISSION_MATRIX: dict[str, list[str]] = {
    # Availability (own schedule)
    "manage_own_availability": ["volunteer"],
    "check_own_availability": ["volunteer"],

    # Matching
    "find_volunteers": ["admin"],

    # Donations
    "submit_donation": ["donor", "volunteer", "admin", "charity"],
    "view_own_donations": ["donor", "volunteer", "admin", "charity"],

    # Pickup lifecycle
    "view_own_pickups": ["volunteer"],
    "update_pickup_status": ["volunteer", "admin"],

    # Charity workflow
    "view_incoming_donations": ["charity"],
    "confirm_donation": ["charity"],
}


def has_permission(user: "User", action: str) -> bool:
    """Check if a user has permission to perform an action.

    Args:
        user: The authenticated user
        action: The action name (must be a key in PERMISSION_MATRIX)

    Returns:
        True if the user's role can perform the action, False otherwise
    """
    allowed_roles = PERMISSION_MATRIX.get(action, [])
    return user.role in allowed_roles


def get_permission_denied_message(action: str) -> str:
    """User-facing message for a denied action."""
    allowed_roles = PERMISSION_MATRIX.get(action, [])
    if len(allowed_roles) == 1:
        return f"Only {allowed_roles[0]}s can perform this action"
    return "You do not have permission to perform this action"
