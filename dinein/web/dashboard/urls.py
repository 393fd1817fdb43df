"""URL routing for the staff dashboard."""

from django.urls import path

from dinein.web.dashboard import views

app_name = "dashboard"

urlpatterns = [
    path("dashboard", views.dashboard, name="dashboard"),
]
