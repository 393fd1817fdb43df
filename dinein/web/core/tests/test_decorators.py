"""Tests for request decorators and role resolution."""

import json

import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from django.http import JsonResponse

from dinein.web.core.decorators import idempotency_key_required, staff_required
from dinein.web.core.models import User
from dinein.web.core.roles import resolve_role


class TestIdempotencyKeyRequired:
    def _view(self, status=201):
        calls = []

        @idempotency_key_required
        def view(request):
            calls.append(request)
            return JsonResponse({"n": len(calls)}, status=status)

        return view, calls

    def test_missing_key(self, rf):
        view, calls = self._view()

        response = view(rf.post("/"))

        assert response.status_code == 400
        assert calls == []

    def test_replays_success(self, rf):
        view, calls = self._view()

        first = view(rf.post("/", HTTP_IDEMPOTENCY_KEY="abc"))
        second = view(rf.post("/", HTTP_IDEMPOTENCY_KEY="abc"))

        assert len(calls) == 1
        assert second.status_code == 201
        assert json.loads(second.content) == json.loads(first.content)

    def test_errors_are_not_replayed(self, rf):
        view, calls = self._view(status=503)

        view(rf.post("/", HTTP_IDEMPOTENCY_KEY="abc"))
        view(rf.post("/", HTTP_IDEMPOTENCY_KEY="abc"))

        assert len(calls) == 2

    def test_concurrent_request_rejected(self, rf):
        view, calls = self._view()
        cache.add("idempotency:abc:lock", True)

        response = view(rf.post("/", HTTP_IDEMPOTENCY_KEY="abc"))

        assert response.status_code == 409
        assert calls == []


@pytest.mark.django_db
class TestStaffRequired:
    @staticmethod
    @staff_required
    def view(_request):
        return JsonResponse({"ok": True})

    def _request(self, rf, user):
        request = rf.get("/")
        request.user = user
        return request

    def test_anonymous(self, rf):
        response = self.view(self._request(rf, AnonymousUser()))

        assert response.status_code == 401

    def test_no_role(self, rf):
        user = User.objects.create_user(username="guest", password="x")

        response = self.view(self._request(rf, user))

        assert response.status_code == 403

    def test_staff(self, rf, cashier):
        response = self.view(self._request(rf, cashier))

        assert response.status_code == 200


@pytest.mark.django_db
class TestResolveRole:
    def test_staff_role(self, kitchen):
        assert resolve_role(kitchen) == User.Role.KITCHEN

    def test_superuser_is_manager(self):
        admin = User.objects.create_superuser(username="root", password="x")

        assert resolve_role(admin) == User.Role.MANAGER

    def test_customer(self):
        assert resolve_role(AnonymousUser()) is None
        assert resolve_role(None) is None

    def test_unknown_role(self):
        user = User(username="odd", role="waiter")

        assert resolve_role(user) is None
