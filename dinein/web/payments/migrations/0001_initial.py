import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("restaurant", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PaymentCallback",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "order_ref",
                    models.CharField(
                        help_text="Order id exactly as reported", max_length=64
                    ),
                ),
                ("gateway", models.CharField(blank=True, max_length=20)),
                (
                    "reference",
                    models.CharField(
                        blank=True,
                        help_text="Gateway transaction id the report was about",
                        max_length=255,
                    ),
                ),
                (
                    "outcome",
                    models.CharField(
                        choices=[
                            ("succeeded", "Succeeded"),
                            ("pending", "Pending"),
                            ("failed", "Failed"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        choices=[
                            ("webhook", "Gateway webhook"),
                            ("client", "Customer device"),
                            ("reconcile", "Reconciliation sweep"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "payload",
                    models.JSONField(
                        blank=True, default=dict, help_text="Raw report payload"
                    ),
                ),
                (
                    "applied",
                    models.BooleanField(
                        default=False, help_text="True if this report changed the order"
                    ),
                ),
                ("received_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        help_text="Null when the report named an unknown order",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payment_callbacks",
                        to="restaurant.order",
                    ),
                ),
            ],
            options={
                "ordering": ["-received_at"],
                "indexes": [
                    models.Index(
                        fields=["order", "received_at"], name="payment_cb_order_idx"
                    ),
                ],
            },
        ),
    ]
