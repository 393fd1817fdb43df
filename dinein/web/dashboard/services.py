"""
Dashboard projection - counts and revenue computed from stored orders.

Revenue counts orders whose payment status is paid, including cancelled
orders that were paid (those still need a refund and show up here until
one is recorded).
"""

from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.db.models import Count, Q, QuerySet, Sum

from dinein.web.restaurant.managers import BOARDS
from dinein.web.restaurant.models import (
    MenuItem,
    Order,
    OrderStatus,
    PaymentStatus,
)


@dataclass(frozen=True)
class DashboardStats:
    total_orders: int
    active_orders: int
    completed_orders: int
    cancelled_orders: int
    total_revenue: Decimal
    low_stock_items: int


def low_stock_items(threshold: int | None = None) -> QuerySet[MenuItem]:
    """Menu items that are in stock but at or below the threshold."""
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    return MenuItem.objects.filter(
        stock_quantity__gt=0, stock_quantity__lte=threshold
    ).order_by("stock_quantity", "name")


def get_stats(threshold: int | None = None) -> DashboardStats:
    active_statuses, _ordering = BOARDS["active"]
    totals = Order.objects.aggregate(
        total=Count("pk"),
        active=Count("pk", filter=Q(status__in=active_statuses)),
        completed=Count("pk", filter=Q(status=OrderStatus.COMPLETED)),
        cancelled=Count("pk", filter=Q(status=OrderStatus.CANCELLED)),
        revenue=Sum("total_amount", filter=Q(payment_status=PaymentStatus.PAID)),
    )
    return DashboardStats(
        total_orders=totals["total"],
        active_orders=totals["active"],
        completed_orders=totals["completed"],
        cancelled_orders=totals["cancelled"],
        total_revenue=totals["revenue"] or Decimal("0.00"),
        low_stock_items=low_stock_items(threshold).count(),
    )


def recent_orders(limit: int = 5) -> QuerySet[Order]:
    return Order.objects.prefetch_related("lines").order_by("-created_at")[:limit]
