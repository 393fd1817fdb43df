"""
Role resolution - maps an authenticated actor to a staff role.

The order engine only ever sees the resolved role, never the user.
"""

from typing import Any

from dinein.web.core.models import User


def resolve_role(user: Any) -> str | None:
    """
    Resolve the staff role for a request user.

    Args:
        user: request.user (may be AnonymousUser)

    Returns:
        One of User.Role values, or None for customers and role-less accounts
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    if getattr(user, "is_superuser", False):
        return User.Role.MANAGER
    role = getattr(user, "role", "")
    if role in User.Role.values:
        return str(role)
    return None
