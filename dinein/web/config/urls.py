"""
URL configuration for Dine-in.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    # Customer-facing API (menu, checkout, order tracking)
    path("api/", include("dinein.web.restaurant.urls")),
    # Staff API (boards, transitions, dashboard)
    path("api/staff/", include("dinein.web.restaurant.staff_urls")),
    path("api/staff/", include("dinein.web.dashboard.urls")),
    # Change notifications
    path("api/events/", include("dinein.web.realtime.urls")),
    # Gateway callbacks
    path("payments/", include("dinein.web.payments.urls")),
]
