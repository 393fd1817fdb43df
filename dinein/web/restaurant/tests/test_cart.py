"""Tests for the client-side cart."""

from decimal import Decimal

import pytest

from dinein.web.restaurant.cart import Cart, MenuItemSnapshot

BURGER = MenuItemSnapshot(id=1, name="Burger", price=Decimal("10.00"))
FRIES = MenuItemSnapshot(id=2, name="Fries", price=Decimal("3.50"))


class TestCart:
    def test_add_creates_line(self):
        cart = Cart()
        cart.add(1, 2, menu_item=BURGER)

        assert len(cart) == 1
        assert cart.lines[0].quantity == 2

    def test_add_same_item_merges(self):
        cart = Cart()
        cart.add(1, 1, "no onions", menu_item=BURGER)
        cart.add(1, 2)

        assert len(cart) == 1
        assert cart.lines[0].quantity == 3
        assert cart.lines[0].special_instructions == "no onions"

    def test_merge_replaces_instructions_when_given(self):
        cart = Cart()
        cart.add(1, 1, "no onions")
        cart.add(1, 1, "extra cheese")

        assert cart.lines[0].special_instructions == "extra cheese"

    def test_add_rejects_zero_quantity(self):
        with pytest.raises(ValueError):
            Cart().add(1, 0)

    def test_update_quantity_to_zero_removes_line(self):
        cart = Cart()
        cart.add(1, 1)
        cart.add(2, 1)
        cart.update_quantity(1, 0)

        assert [line.menu_item_id for line in cart.lines] == [2]

    def test_update_quantity(self):
        cart = Cart()
        cart.add(1, 1)
        cart.update_quantity(1, 5)

        assert cart.lines[0].quantity == 5

    def test_update_instructions(self):
        cart = Cart()
        cart.add(1, 1)
        cart.update_instructions(1, "well done")

        assert cart.lines[0].special_instructions == "well done"

    def test_total_uses_snapshots(self):
        cart = Cart()
        cart.add(1, 2, menu_item=BURGER)
        cart.add(2, 1, menu_item=FRIES)

        assert cart.total() == Decimal("23.50")

    def test_clear(self):
        cart = Cart()
        cart.add(1, 1)
        cart.clear()

        assert not cart
        assert cart.total() == Decimal("0")

    def test_lines_keep_insertion_order(self):
        cart = Cart()
        cart.add(2, 1)
        cart.add(1, 1)
        cart.add(2, 1)

        assert [line.menu_item_id for line in cart.lines] == [2, 1]
