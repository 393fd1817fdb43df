"""Payment gateways - implementations for each payment provider."""

from typing import Any

from django.conf import settings

from dinein.web.payments.gateways.base import (
    GatewayTransaction,
    PaymentGateway,
    PaymentItem,
    PaymentOutcome,
    PaymentRequest,
)
from dinein.web.payments.gateways.mock import MockGateway
from dinein.web.payments.gateways.snap import SnapGateway
from dinein.web.payments.gateways.stripe_gateway import StripeGateway

GATEWAYS: dict[str, type] = {
    "mock": MockGateway,
    "snap": SnapGateway,
    "stripe": StripeGateway,
}


def get_gateway(name: str | None = None, **kwargs: Any) -> PaymentGateway:
    """
    Get a payment gateway instance by name.

    Use this factory rather than instantiating gateways directly.

    Args:
        name: Gateway name; defaults to settings.PAYMENT_GATEWAY.
        **kwargs: Additional arguments passed to the gateway constructor.
            For SnapGateway: sandbox=False for production.

    Returns:
        A gateway implementing the PaymentGateway protocol.

    Raises:
        ValueError: If the gateway is not supported.

    Example:
        gateway = get_gateway("snap")
        transaction = gateway.create_transaction(request)
    """
    name = name or settings.PAYMENT_GATEWAY
    try:
        gateway_class = GATEWAYS[name]
    except KeyError:
        supported = ", ".join(sorted(GATEWAYS))
        raise ValueError(
            f"Unsupported payment gateway: {name}. Supported: {supported}"
        ) from None
    gateway: PaymentGateway = gateway_class(**kwargs)
    return gateway


__all__ = [
    "GatewayTransaction",
    "MockGateway",
    "PaymentGateway",
    "PaymentItem",
    "PaymentOutcome",
    "PaymentRequest",
    "SnapGateway",
    "StripeGateway",
    "get_gateway",
]
