"""
Core models - staff identity and timestamp base.

Staff roles gate order transitions; customers never log in.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model with a staff role.

    Superusers act as managers regardless of the stored role.
    """

    class Role(models.TextChoices):
        MANAGER = "manager", "Manager"
        CASHIER = "cashier", "Cashier"
        KITCHEN = "kitchen", "Kitchen"

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        blank=True,
        help_text="Blank = no staff permissions",
    )

    class Meta:
        ordering = ["username"]

    def __str__(self) -> str:
        if self.role:
            return f"{self.username} ({self.role})"
        return self.username


class TimestampedModel(models.Model):
    """
    Abstract base providing created/updated timestamps.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
