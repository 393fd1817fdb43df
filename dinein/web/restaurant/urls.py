"""
URL routing for customer-facing restaurant API endpoints.

All endpoints are public (no auth required) and CORS-enabled.
"""

from django.urls import path

from dinein.web.restaurant import views

app_name = "restaurant"

urlpatterns = [
    # Menu endpoints
    path("menu", views.menu, name="menu"),
    # Availability endpoint (for sold-out polling)
    path("availability", views.availability, name="availability"),
    # Order endpoints
    path("orders", views.create_order, name="order_create"),
    path("orders/<str:order_id>", views.order_detail, name="order_detail"),
    path("orders/<str:order_id>/status", views.order_status, name="order_status"),
    path("orders/<str:order_id>/payment", views.order_payment, name="order_payment"),
    path(
        "orders/<str:order_id>/payment-result",
        views.order_payment_result,
        name="order_payment_result",
    ),
]
