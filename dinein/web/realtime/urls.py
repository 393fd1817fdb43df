"""URL routing for change notification streams."""

from django.urls import path

from dinein.web.realtime import views

app_name = "realtime"

urlpatterns = [
    path("<str:entity_kind>/stream", views.event_stream, name="event_stream"),
]
