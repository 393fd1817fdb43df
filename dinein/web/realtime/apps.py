"""Django app configuration for realtime module."""

from django.apps import AppConfig


class RealtimeConfig(AppConfig):
    """Realtime app configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "dinein.web.realtime"
    verbose_name = "Realtime"
