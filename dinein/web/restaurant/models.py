"""
Restaurant models - menu items, orders and order lines.

Menu items are owned by inventory management (admin); the order engine only
reads price, name and availability from them when an order is created.
Order lines keep a snapshot of name and price so later menu edits never
rewrite history.
"""

import uuid
from decimal import Decimal

from django.db import models

from dinein.web.core.models import TimestampedModel
from dinein.web.restaurant.managers import OrderQuerySet


class MenuItem(TimestampedModel):
    """
    Orderable menu item.

    Invariant: is_available is True iff stock_quantity > 0.
    Use set_stock() rather than writing the two fields separately.
    """

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    category = models.CharField(max_length=100, blank=True)
    image_url = models.URLField(blank=True)

    is_available = models.BooleanField(
        default=True,
        help_text="False = sold out",
    )
    stock_quantity = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["category", "name"]
        indexes = [
            models.Index(fields=["category", "name"], name="menu_item_category_idx"),
            models.Index(fields=["is_available"], name="menu_item_available_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="menu_item_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def set_stock(self, quantity: int) -> None:
        """
        Set stock and keep availability in step with it.

        Args:
            quantity: New stock level (>= 0)

        Raises:
            ValueError: If quantity is negative
        """
        if quantity < 0:
            msg = f"Stock quantity cannot be negative: {quantity}"
            raise ValueError(msg)

        self.stock_quantity = quantity
        self.is_available = quantity > 0
        self.save(update_fields=["stock_quantity", "is_available", "updated_at"])


class OrderStatus(models.TextChoices):
    """Order lifecycle status. Edges live in restaurant.transitions."""

    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class PaymentStatus(models.TextChoices):
    """Settlement state of the money, independent of preparation."""

    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"


class Order(TimestampedModel):
    """
    A customer's order from a table.

    total_amount is fixed at creation; lines never change afterwards.
    Status changes go through restaurant.services.lifecycle only.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    table_number = models.PositiveIntegerField()
    customer_name = models.CharField(max_length=200)

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)

    # Payment
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_gateway = models.CharField(
        max_length=20,
        blank=True,
        help_text="Gateway that holds the current transaction",
    )
    payment_reference = models.CharField(
        max_length=255,
        blank=True,
        help_text="Gateway-side id used for status lookups and callbacks",
    )
    payment_token = models.CharField(
        max_length=255,
        blank=True,
        help_text="Token the customer device opens the payment UI with",
    )

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["status", "created_at"], name="order_status_created_idx"
            ),
            models.Index(fields=["payment_status"], name="order_payment_status_idx"),
            models.Index(fields=["payment_reference"], name="order_payment_ref_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(table_number__gt=0),
                name="order_table_number_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"Order {self.pk} - table {self.table_number} ({self.status})"


class OrderLine(models.Model):
    """
    Line in an order.

    Stores a snapshot of the item name and price at order time.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="lines",
    )
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.SET_NULL,
        null=True,
        related_name="order_lines",
        help_text="Weak reference; null once the item is removed from the menu",
    )

    # Snapshot of item at order time
    item_name = models.CharField(max_length=200)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()
    special_instructions = models.TextField(blank=True)

    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "pk"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_line_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.item_name}"

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity
