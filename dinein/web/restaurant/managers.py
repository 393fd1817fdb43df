"""
Order querysets - status filters, free-text search and staff boards.

Usage in views:
    orders = Order.objects.with_status(["paid", "preparing"]).search("12")
    queue = Order.objects.board("kitchen")
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, TypeVar

from django.db import models
from django.db.models.functions import Cast

if TYPE_CHECKING:
    from .models import Order

_T = TypeVar("_T", bound="Order")

# Board name -> (statuses, ordering)
BOARDS: dict[str, tuple[tuple[str, ...], str]] = {
    # Oldest first so the kitchen works the queue in arrival order
    "kitchen": (("paid", "preparing", "ready"), "created_at"),
    "active": (("pending", "paid", "preparing", "ready"), "-created_at"),
}


class OrderQuerySet(models.QuerySet[_T]):
    """
    QuerySet with the read projections staff screens need.
    """

    def with_status(self, statuses: Iterable[str] | None) -> "OrderQuerySet[_T]":
        """
        Filter to a set of statuses.

        Args:
            statuses: Status values to keep; None or empty keeps everything

        Returns:
            Filtered queryset
        """
        wanted = [s for s in (statuses or []) if s]
        if not wanted:
            return self
        return self.filter(status__in=wanted)

    def search(self, term: str) -> "OrderQuerySet[_T]":
        """
        Case-insensitive match over order id, customer name and table number.
        """
        term = (term or "").strip()
        if not term:
            return self
        return self.annotate(
            table_text=Cast("table_number", models.CharField(max_length=20))
        ).filter(
            models.Q(id__icontains=term)
            | models.Q(customer_name__icontains=term)
            | models.Q(table_text__icontains=term)
        )

    def board(self, name: str) -> "OrderQuerySet[_T]":
        """
        Named status projection (e.g. the kitchen queue).

        Raises:
            KeyError: If the board name is unknown
        """
        statuses, ordering = BOARDS[name]
        return self.with_status(statuses).order_by(ordering)
