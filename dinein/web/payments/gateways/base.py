"""Base payment gateway protocol - interface for all payment providers."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable


class PaymentOutcome(StrEnum):
    """Settlement result reported by a gateway."""

    SUCCEEDED = "succeeded"
    PENDING = "pending"
    FAILED = "failed"


@dataclass(frozen=True)
class PaymentItem:
    """One line as the gateway shows it to the customer."""

    id: str
    name: str
    price: Decimal
    quantity: int


@dataclass(frozen=True)
class PaymentRequest:
    """Everything a gateway needs to open a transaction for an order."""

    order_id: str
    amount: Decimal
    customer_name: str
    currency: str
    items: list[PaymentItem] = field(default_factory=list)

    @classmethod
    def from_order(cls, order: Any, currency: str) -> "PaymentRequest":
        return cls(
            order_id=str(order.pk),
            amount=order.total_amount,
            customer_name=order.customer_name,
            currency=currency,
            items=[
                PaymentItem(
                    id=str(line.menu_item_id or f"line-{line.position}"),
                    name=line.item_name,
                    price=line.unit_price,
                    quantity=line.quantity,
                )
                for line in order.lines.all()
            ],
        )


@dataclass(frozen=True)
class GatewayTransaction:
    """
    A transaction opened on the gateway.

    token is what the customer device opens the payment UI with;
    reference is the id used for status lookups and callbacks.
    """

    token: str
    reference: str
    redirect_url: str | None = None


@runtime_checkable
class PaymentGateway(Protocol):
    """
    Protocol defining the interface for payment gateway integrations.

    All gateways (Snap, Stripe, Mock) must implement this interface.
    Calls are synchronous and bounded by a timeout.
    """

    @property
    def name(self) -> str:
        """Short gateway name stored on the order."""
        ...

    def close(self) -> None:
        """Release any connections the gateway owns."""
        ...

    def create_transaction(self, request: PaymentRequest) -> GatewayTransaction:
        """
        Open a payment transaction for an order.

        Args:
            request: Order total, customer and lines.

        Returns:
            Token and reference for the new transaction.

        Raises:
            GatewayUnavailable: If the gateway cannot be reached, times out,
                or answers with a non-success response.
        """
        ...

    def fetch_outcome(self, reference: str) -> PaymentOutcome:
        """
        Ask the gateway how a transaction ended.

        Args:
            reference: Reference returned by create_transaction.

        Returns:
            Current settlement outcome.

        Raises:
            GatewayUnavailable: If the lookup fails.
        """
        ...
