"""Restaurant services - order creation, status changes and read projections."""

from dinein.web.restaurant.services.lifecycle import (
    checkout,
    create_order,
    get_order,
    list_orders,
    transition,
)

__all__ = [
    "checkout",
    "create_order",
    "get_order",
    "list_orders",
    "transition",
]
