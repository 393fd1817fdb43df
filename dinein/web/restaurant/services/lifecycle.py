"""
Order lifecycle service - creates orders and drives their status.

Handles:
1. Cart -> Order materialization with price snapshot and atomic write
2. Status transitions with role checks and compare-and-set writes
3. Read projections (single order, filtered lists, boards)

Every successful mutation publishes a change event after commit.
"""

import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Any

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from dinein.web.realtime.notifier import ChangeAction, EntityKind, publish_on_commit
from dinein.web.restaurant.cart import Cart, CartLine
from dinein.web.restaurant.exceptions import EmptyCart, InvalidInput, NotFound
from dinein.web.restaurant.managers import BOARDS, OrderQuerySet
from dinein.web.restaurant.models import (
    MenuItem,
    Order,
    OrderLine,
    OrderStatus,
    PaymentStatus,
)
from dinein.web.restaurant.transitions import check_transition

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _validate_request(
    table_number: Any, customer_name: str, lines: Sequence[CartLine]
) -> list[dict[str, str]]:
    """Shape checks that need no database access."""
    errors: list[dict[str, str]] = []

    if (
        isinstance(table_number, bool)
        or not isinstance(table_number, int)
        or table_number <= 0
    ):
        errors.append(
            {"field": "table_number", "message": "Table number must be positive"}
        )

    if not (customer_name or "").strip():
        errors.append({"field": "customer_name", "message": "Name is required"})

    for i, line in enumerate(lines):
        if isinstance(line.quantity, bool) or line.quantity <= 0:
            errors.append(
                {
                    "field": f"lines[{i}].quantity",
                    "message": "Quantity must be at least 1",
                }
            )

    return errors


def _load_menu_items(
    lines: Sequence[CartLine],
) -> tuple[dict[int, MenuItem], list[dict[str, str]]]:
    """Fetch referenced menu items and check each one can be ordered."""
    errors: list[dict[str, str]] = []
    items = MenuItem.objects.in_bulk({line.menu_item_id for line in lines})

    for i, line in enumerate(lines):
        item = items.get(line.menu_item_id)
        if item is None:
            errors.append(
                {"field": f"lines[{i}].menu_item_id", "message": "Item not found"}
            )
        elif not item.is_available:
            errors.append(
                {
                    "field": f"lines[{i}].menu_item_id",
                    "message": f"'{item.name}' is currently unavailable",
                }
            )

    return items, errors


def create_order(
    table_number: int,
    customer_name: str,
    lines: Iterable[CartLine],
) -> Order:
    """
    Materialize a cart into a pending order.

    Prices come from the menu as it is now; the cart's own snapshots are
    display-only. The order and its lines are written in one transaction.

    Args:
        table_number: Table the customer sits at (> 0)
        customer_name: Display name for staff screens
        lines: Cart lines in display order

    Returns:
        The new Order (status pending, payment pending)

    Raises:
        EmptyCart: If there are no lines
        InvalidInput: If the table, name, a quantity or a menu item is invalid
    """
    lines = list(lines)
    if not lines:
        raise EmptyCart("Your cart is empty")

    errors = _validate_request(table_number, customer_name, lines)
    if errors:
        raise InvalidInput("Invalid order request", details=errors)

    items, errors = _load_menu_items(lines)
    if errors:
        raise InvalidInput("Some items cannot be ordered", details=errors)

    total = sum(
        (items[line.menu_item_id].price * line.quantity for line in lines),
        Decimal("0"),
    ).quantize(CENT)

    with transaction.atomic():
        order = Order.objects.create(
            table_number=table_number,
            customer_name=customer_name.strip(),
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            total_amount=total,
        )
        OrderLine.objects.bulk_create(
            [
                OrderLine(
                    order=order,
                    menu_item=items[line.menu_item_id],
                    item_name=items[line.menu_item_id].name,
                    unit_price=items[line.menu_item_id].price,
                    quantity=line.quantity,
                    special_instructions=line.special_instructions,
                    position=position,
                )
                for position, line in enumerate(lines)
            ]
        )
        publish_on_commit(EntityKind.ORDER, order.pk, ChangeAction.CREATED)

    logger.info(
        "Order created: order_id=%s table=%s lines=%d total=%s",
        order.pk,
        order.table_number,
        len(lines),
        order.total_amount,
    )
    return order


def checkout(cart: Cart, table_number: int, customer_name: str) -> Order:
    """
    Create an order from a cart and clear the cart on success.

    The cart is left untouched when creation fails so the customer can fix it.
    """
    order = create_order(table_number, customer_name, cart.lines)
    cart.clear()
    return order


def get_order(order_id: Any) -> Order:
    """
    Load an order with its lines.

    Raises:
        NotFound: If the id is unknown or malformed
    """
    try:
        return Order.objects.prefetch_related("lines").get(pk=order_id)
    except (Order.DoesNotExist, ValidationError, ValueError) as exc:
        raise NotFound(f"Order {order_id} not found", order_id=order_id) from exc


def list_orders(
    statuses: Iterable[str] | None = None,
    search: str = "",
    board: str | None = None,
) -> OrderQuerySet[Order]:
    """
    Filtered order projection, newest first unless a board says otherwise.

    Args:
        statuses: Keep only these statuses (None = all)
        search: Free text over id, customer name and table number
        board: Named projection ("kitchen", "active"); narrows statuses

    Raises:
        InvalidInput: If the board name or a status is unknown
    """
    wanted = list(statuses or [])
    unknown = [s for s in wanted if s not in OrderStatus.values]
    if unknown:
        raise InvalidInput(
            "Unknown status filter",
            details=[
                {"field": "status", "message": f"Unknown status '{s}'"}
                for s in unknown
            ],
        )

    orders: OrderQuerySet[Order] = Order.objects.prefetch_related("lines").all()
    if board:
        if board not in BOARDS:
            raise InvalidInput(
                "Unknown board",
                details=[{"field": "board", "message": f"Unknown board '{board}'"}],
            )
        orders = orders.board(board)

    return orders.with_status(wanted).search(search)


def transition(order_id: Any, target_status: str, actor_role: str | None) -> Order:
    """
    Move an order to a new status.

    The write is conditioned on the status read just before it. If another
    client changed the order in between, the request is re-evaluated against
    the new status; the graph has no cycles so this settles quickly.

    Args:
        order_id: Order to change
        target_status: Requested status
        actor_role: Resolved staff role of the caller

    Returns:
        The order as stored after the request

    Raises:
        NotFound: If the order does not exist
        IllegalTransition: If target is not reachable from the current status
        Forbidden: If the role may not perform the change
    """
    order = get_order(order_id)

    while True:
        current = order.status
        if not check_transition(current, target_status, actor_role):
            logger.debug(
                "Order %s already %s, nothing to do", order.pk, target_status
            )
            return order

        updates: dict[str, Any] = {
            "status": target_status,
            "updated_at": timezone.now(),
        }
        if current == OrderStatus.PENDING and target_status == OrderStatus.PAID:
            # Manual settlement (e.g. cash at the counter)
            updates["payment_status"] = PaymentStatus.PAID

        changed = Order.objects.filter(pk=order.pk, status=current).update(**updates)
        if changed:
            publish_on_commit(EntityKind.ORDER, order.pk)
            order.refresh_from_db()
            logger.info(
                "Order %s moved %s -> %s by %s",
                order.pk,
                current,
                target_status,
                actor_role,
            )
            return order

        logger.info(
            "Order %s changed while moving %s -> %s, re-checking",
            order.pk,
            current,
            target_status,
        )
        order.refresh_from_db()
