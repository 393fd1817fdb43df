"""URL configuration for payments app."""

from django.urls import path

from dinein.web.payments import webhooks

app_name = "payments"

urlpatterns = [
    path("webhooks/stripe", webhooks.stripe_webhook, name="stripe-webhook"),
    path("webhooks/snap", webhooks.snap_webhook, name="snap-webhook"),
]
