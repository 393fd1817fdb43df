"""Admin registration for payment models."""

from django.contrib import admin

from dinein.web.payments.models import PaymentCallback


@admin.register(PaymentCallback)
class PaymentCallbackAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    """Read-only admin for settlement reports."""

    list_display = [
        "order_ref",
        "gateway",
        "source",
        "outcome",
        "applied",
        "received_at",
    ]
    list_filter = ["gateway", "source", "outcome", "applied"]
    search_fields = ["order_ref", "reference"]
    readonly_fields = [
        "order",
        "order_ref",
        "gateway",
        "reference",
        "outcome",
        "source",
        "payload",
        "applied",
        "received_at",
    ]
    ordering = ["-received_at"]
    date_hierarchy = "received_at"

    def has_add_permission(self, request):  # type: ignore[no-untyped-def]
        return False
