"""Tests for the staff dashboard."""

from decimal import Decimal

import pytest

from dinein.web.dashboard.services import get_stats, low_stock_items, recent_orders
from dinein.web.restaurant.models import OrderStatus, PaymentStatus
from dinein.web.restaurant.tests.factories import MenuItemFactory, OrderFactory


@pytest.fixture
def orders(db):
    OrderFactory(status=OrderStatus.PENDING, total_amount=Decimal("5.00"))
    OrderFactory(
        status=OrderStatus.PREPARING,
        payment_status=PaymentStatus.PAID,
        total_amount=Decimal("10.00"),
    )
    OrderFactory(
        status=OrderStatus.COMPLETED,
        payment_status=PaymentStatus.PAID,
        total_amount=Decimal("20.00"),
    )
    OrderFactory(status=OrderStatus.CANCELLED, total_amount=Decimal("40.00"))
    # Paid after it was cancelled: still counted until refunded
    OrderFactory(
        status=OrderStatus.CANCELLED,
        payment_status=PaymentStatus.PAID,
        total_amount=Decimal("2.50"),
    )


@pytest.mark.django_db
class TestGetStats:
    def test_counts_and_revenue(self, orders):
        stats = get_stats()

        assert stats.total_orders == 5
        assert stats.active_orders == 2
        assert stats.completed_orders == 1
        assert stats.cancelled_orders == 2
        assert stats.total_revenue == Decimal("32.50")

    def test_empty(self):
        stats = get_stats()

        assert stats.total_orders == 0
        assert stats.total_revenue == Decimal("0.00")

    def test_low_stock(self):
        MenuItemFactory(name="Soup", stock_quantity=2)
        MenuItemFactory(name="Salad", stock_quantity=5)
        MenuItemFactory(name="Steak", stock_quantity=50)
        MenuItemFactory(name="Pie", stock_quantity=0)

        assert [item.name for item in low_stock_items(threshold=5)] == [
            "Soup",
            "Salad",
        ]
        assert get_stats(threshold=3).low_stock_items == 1

    def test_recent_orders_newest_first(self, orders):
        recent = list(recent_orders(limit=3))

        assert len(recent) == 3
        assert recent[0].created_at >= recent[-1].created_at


@pytest.mark.django_db
class TestDashboardView:
    url = "/api/staff/dashboard"

    @pytest.mark.parametrize("role_fixture", ["manager", "cashier", "kitchen"])
    def test_any_staff_role(self, client, orders, role_fixture, request):
        client.force_login(request.getfixturevalue(role_fixture))

        response = client.get(self.url)

        assert response.status_code == 200
        data = response.json()
        assert data["total_orders"] == 5
        assert data["total_revenue"] == "32.50"
        assert len(data["recent_orders"]) == 5

    def test_low_stock_listed(self, client, manager, settings):
        settings.LOW_STOCK_THRESHOLD = 3
        soup = MenuItemFactory(name="Soup", stock_quantity=1)
        client.force_login(manager)

        data = client.get(self.url).json()

        assert data["low_stock_items"] == 1
        assert data["low_stock"] == [
            {"id": soup.pk, "name": "Soup", "stock_quantity": 1}
        ]

    def test_anonymous(self, client):
        response = client.get(self.url)

        assert response.status_code == 401
