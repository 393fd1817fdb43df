"""Tests for restaurant models."""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from dinein.web.restaurant.models import Order
from dinein.web.restaurant.tests.factories import (
    MenuItemFactory,
    OrderFactory,
    OrderLineFactory,
)


@pytest.mark.django_db
class TestMenuItem:
    def test_set_stock_keeps_availability_in_step(self):
        item = MenuItemFactory(stock_quantity=3)

        item.set_stock(0)
        item.refresh_from_db()
        assert item.stock_quantity == 0
        assert item.is_available is False

        item.set_stock(8)
        item.refresh_from_db()
        assert item.is_available is True

    def test_set_stock_rejects_negative(self):
        item = MenuItemFactory()
        with pytest.raises(ValueError):
            item.set_stock(-1)


@pytest.mark.django_db
class TestOrder:
    def test_uuid_primary_key(self):
        order = OrderFactory()
        assert len(str(order.pk)) == 36

    def test_newest_first(self):
        first = OrderFactory()
        second = OrderFactory()
        Order.objects.filter(pk=first.pk).update(
            created_at=timezone.now() - timedelta(minutes=5)
        )

        assert list(Order.objects.all()) == [second, first]

    def test_line_total(self):
        line = OrderLineFactory(unit_price=Decimal("4.25"), quantity=3)
        assert line.line_total == Decimal("12.75")

    def test_lines_ordered_by_position(self):
        order = OrderFactory()
        b = OrderLineFactory(order=order, position=1)
        a = OrderLineFactory(order=order, position=0)

        assert list(order.lines.all()) == [a, b]

    def test_menu_item_removal_keeps_line(self):
        line = OrderLineFactory()
        line.menu_item.delete()
        line.refresh_from_db()

        assert line.menu_item is None
        assert line.item_name
