"""Admin registration for restaurant models."""

from typing import Any

from django.contrib import admin

from dinein.web.realtime.notifier import ChangeAction, EntityKind, publish_on_commit
from dinein.web.restaurant.models import MenuItem, Order, OrderLine


class OrderLineInline(admin.TabularInline):  # type: ignore[type-arg]
    """Inline for lines within an order."""

    model = OrderLine
    extra = 0
    can_delete = False
    fields = ["item_name", "quantity", "unit_price", "special_instructions"]
    readonly_fields = ["item_name", "quantity", "unit_price", "special_instructions"]

    def has_add_permission(self, request, obj=None):  # type: ignore[no-untyped-def]
        return False


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    """
    Admin for menu items (the inventory surface).

    Availability follows stock, so it is not editable on its own.
    """

    list_display = ["name", "category", "price", "stock_quantity", "is_available"]
    list_filter = ["category", "is_available"]
    search_fields = ["name", "category"]
    readonly_fields = ["is_available", "created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["name", "description", "category", "image_url"]}),
        ("Pricing", {"fields": ["price"]}),
        ("Stock", {"fields": ["stock_quantity", "is_available"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]

    def save_model(self, request: Any, obj: MenuItem, form: Any, change: bool) -> None:
        obj.set_stock(obj.stock_quantity)
        super().save_model(request, obj, form, change)
        action = ChangeAction.UPDATED if change else ChangeAction.CREATED
        publish_on_commit(EntityKind.MENU_ITEM, obj.pk, action)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    """
    Read-only admin for orders.

    Status changes go through the staff API so the transition rules apply.
    """

    list_display = [
        "id",
        "table_number",
        "customer_name",
        "status",
        "payment_status",
        "total_amount",
        "created_at",
    ]
    list_filter = ["status", "payment_status", "payment_gateway"]
    search_fields = ["id", "customer_name", "payment_reference"]
    inlines = [OrderLineInline]
    readonly_fields = [
        "id",
        "table_number",
        "customer_name",
        "status",
        "total_amount",
        "payment_status",
        "payment_gateway",
        "payment_reference",
        "payment_token",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"

    fieldsets = [
        (None, {"fields": ["id", "table_number", "customer_name"]}),
        ("Status", {"fields": ["status", "total_amount"]}),
        (
            "Payment",
            {
                "fields": [
                    "payment_status",
                    "payment_gateway",
                    "payment_reference",
                    "payment_token",
                ]
            },
        ),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]

    def has_add_permission(self, request):  # type: ignore[no-untyped-def]
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore[no-untyped-def]
        return False
