"""URL routing for staff order endpoints (session auth required)."""

from django.urls import path

from dinein.web.restaurant import staff_views

app_name = "staff"

urlpatterns = [
    path("orders", staff_views.order_list, name="order_list"),
    path(
        "orders/<str:order_id>/transition",
        staff_views.order_transition,
        name="order_transition",
    ),
]
