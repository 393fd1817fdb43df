"""
Pytest configuration for Django app tests.
"""

import pytest
from django.core.cache import cache
from django.test import Client

from dinein.web.core.models import User
from dinein.web.realtime import notifier


@pytest.fixture(autouse=True)
def fresh_notifier(monkeypatch: pytest.MonkeyPatch) -> notifier.ChangeNotifier:
    """Give every test its own change notifier."""
    instance = notifier.ChangeNotifier(queue_size=16)
    monkeypatch.setattr(notifier, "_notifier", instance)
    return instance


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    cache.clear()


def _staff_user(username: str, role: str) -> User:
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="testpass123",
        role=role,
    )


@pytest.fixture
def manager(db: None) -> User:
    return _staff_user("manager", User.Role.MANAGER)


@pytest.fixture
def cashier(db: None) -> User:
    return _staff_user("cashier", User.Role.CASHIER)


@pytest.fixture
def kitchen(db: None) -> User:
    return _staff_user("kitchen", User.Role.KITCHEN)


@pytest.fixture
def staff_client_for():
    """Return a factory for a test client logged in as the given user."""

    def _login(user: User) -> Client:
        http_client = Client()
        http_client.force_login(user)
        return http_client

    return _login
