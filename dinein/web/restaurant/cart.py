"""
Cart aggregate - the customer's selection before an order exists.

A Cart lives only in the ordering client's memory (a kiosk process, a
session, or rebuilt from a checkout request body). It is never persisted;
checkout turns it into an Order and the cart is cleared.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class MenuItemSnapshot:
    """Display copy of a menu item taken when it was added to the cart."""

    id: int
    name: str
    price: Decimal

    @classmethod
    def from_menu_item(cls, item: Any) -> "MenuItemSnapshot":
        return cls(id=item.pk, name=item.name, price=item.price)


@dataclass
class CartLine:
    """One selected item. quantity is always >= 1 inside a Cart."""

    menu_item_id: int
    quantity: int
    special_instructions: str = ""
    menu_item: MenuItemSnapshot | None = None

    @property
    def display_total(self) -> Decimal:
        """Price shown in the cart; the order total is recomputed at checkout."""
        if self.menu_item is None:
            return Decimal("0")
        return self.menu_item.price * self.quantity


@dataclass
class Cart:
    """
    Ordered collection of cart lines, at most one line per menu item.
    """

    lines: list[CartLine] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lines)

    def __bool__(self) -> bool:
        return bool(self.lines)

    def _find(self, menu_item_id: int) -> CartLine | None:
        for line in self.lines:
            if line.menu_item_id == menu_item_id:
                return line
        return None

    def add(
        self,
        menu_item_id: int,
        quantity: int = 1,
        special_instructions: str = "",
        menu_item: MenuItemSnapshot | None = None,
    ) -> CartLine:
        """
        Add an item, merging with an existing line for the same item.

        Merging adds the quantities; new instructions replace old ones only
        when they are non-empty.

        Raises:
            ValueError: If quantity < 1
        """
        if quantity < 1:
            msg = f"Quantity must be at least 1, got {quantity}"
            raise ValueError(msg)

        existing = self._find(menu_item_id)
        if existing is not None:
            existing.quantity += quantity
            if special_instructions:
                existing.special_instructions = special_instructions
            if menu_item is not None:
                existing.menu_item = menu_item
            return existing

        line = CartLine(
            menu_item_id=menu_item_id,
            quantity=quantity,
            special_instructions=special_instructions,
            menu_item=menu_item,
        )
        self.lines.append(line)
        return line

    def remove(self, menu_item_id: int) -> None:
        self.lines = [line for line in self.lines if line.menu_item_id != menu_item_id]

    def update_quantity(self, menu_item_id: int, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove(menu_item_id)
            return
        line = self._find(menu_item_id)
        if line is not None:
            line.quantity = quantity

    def update_instructions(self, menu_item_id: int, instructions: str) -> None:
        line = self._find(menu_item_id)
        if line is not None:
            line.special_instructions = instructions

    def clear(self) -> None:
        self.lines = []

    def total(self) -> Decimal:
        """Display total from the snapshots (not authoritative)."""
        return sum((line.display_total for line in self.lines), Decimal("0"))
