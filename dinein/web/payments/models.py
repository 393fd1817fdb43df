"""Payment models - audit trail for settlement attempts."""

from django.db import models

from dinein.web.payments.gateways.base import PaymentOutcome


class CallbackSource(models.TextChoices):
    """Where a settlement report came from."""

    WEBHOOK = "webhook", "Gateway webhook"
    CLIENT = "client", "Customer device"
    RECONCILE = "reconcile", "Reconciliation sweep"


class PaymentCallback(models.Model):
    """
    Audit trail for payment settlement reports.

    One row per call to on_payment_settled, whether or not it changed the
    order. Stores the raw payload for debugging. Never used for revenue.
    """

    order = models.ForeignKey(
        "restaurant.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payment_callbacks",
        help_text="Null when the report named an unknown order",
    )
    order_ref = models.CharField(
        max_length=64,
        help_text="Order id exactly as reported",
    )

    gateway = models.CharField(max_length=20, blank=True)
    reference = models.CharField(
        max_length=255,
        blank=True,
        help_text="Gateway transaction id the report was about",
    )
    outcome = models.CharField(
        max_length=20,
        choices=[(o.value, o.name.title()) for o in PaymentOutcome],
    )
    source = models.CharField(
        max_length=20,
        choices=CallbackSource.choices,
    )

    payload = models.JSONField(
        default=dict,
        blank=True,
        help_text="Raw report payload",
    )
    applied = models.BooleanField(
        default=False,
        help_text="True if this report changed the order",
    )
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-received_at"]
        indexes = [
            models.Index(
                fields=["order", "received_at"], name="payment_cb_order_idx"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.source} {self.outcome} for {self.order_ref}"
