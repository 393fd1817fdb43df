"""
Order status graph and role permissions.

This is the single place that knows which status changes are legal and who
may make them. check_transition() is a pure function of
(current, target, role) so every caller gets the same answer.
"""

from dinein.web.core.models import User
from dinein.web.restaurant.exceptions import Forbidden, IllegalTransition
from dinein.web.restaurant.models import OrderStatus

S = OrderStatus
R = User.Role

# Legal edges of the state machine
TRANSITIONS: dict[str, frozenset[str]] = {
    S.PENDING: frozenset({S.PAID, S.CANCELLED}),
    S.PAID: frozenset({S.PREPARING, S.CANCELLED}),
    S.PREPARING: frozenset({S.READY, S.CANCELLED}),
    S.READY: frozenset({S.COMPLETED}),
    S.COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in TRANSITIONS.items() if not targets)

# Edges each non-manager role may perform. Managers may perform any legal edge.
ROLE_EDGES: dict[str, frozenset[tuple[str, str]]] = {
    R.KITCHEN: frozenset({(S.PAID, S.PREPARING), (S.PREPARING, S.READY)}),
    R.CASHIER: frozenset(
        {
            (S.READY, S.COMPLETED),
            (S.PENDING, S.CANCELLED),
            (S.PAID, S.CANCELLED),
            (S.PREPARING, S.CANCELLED),
        }
    ),
}


def is_legal(current: str, target: str) -> bool:
    """Check whether target is reachable from current in one step."""
    return target in TRANSITIONS.get(current, frozenset())


def can_perform(role: str | None, current: str, target: str) -> bool:
    """Check whether role holds the permission for the edge current -> target."""
    if role == R.MANAGER:
        return True
    if role is None:
        return False
    return (current, target) in ROLE_EDGES.get(role, frozenset())


def check_transition(current: str, target: str, role: str | None) -> bool:
    """
    Decide a status change request.

    Args:
        current: Status the order is in now
        target: Requested status
        role: Resolved staff role of the actor (None for customers)

    Returns:
        True if the order must change, False if it is already in target
        (a repeated click is a no-op, not an error)

    Raises:
        IllegalTransition: If target is not one step away from current
        Forbidden: If the role may not perform this edge
    """
    if target not in TRANSITIONS:
        raise IllegalTransition(f"Unknown status '{target}'", current=current)

    if current == target:
        return False

    if not is_legal(current, target):
        raise IllegalTransition(
            f"Cannot move order from '{current}' to '{target}'",
            current=current,
            target=target,
        )

    if not can_perform(role, current, target):
        raise Forbidden(
            f"Role '{role or 'anonymous'}' may not move an order "
            f"from '{current}' to '{target}'",
        )

    return True
