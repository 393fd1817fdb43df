"""Admin registration for staff users."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from dinein.web.core.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for staff users with their role."""

    list_display = ["username", "email", "role", "is_active", "is_superuser"]
    list_filter = ["role", "is_active", "is_superuser"]
    fieldsets = (
        *BaseUserAdmin.fieldsets,  # type: ignore[misc]
        ("Staff role", {"fields": ["role"]}),
    )
    add_fieldsets = (
        *BaseUserAdmin.add_fieldsets,
        ("Staff role", {"fields": ["role"]}),
    )
