"""Stripe payment gateway - PaymentIntents confirmed on the customer device."""

import logging
from decimal import Decimal
from typing import Any

import stripe
from django.conf import settings

from dinein.web.payments.exceptions import GatewayUnavailable
from dinein.web.payments.gateways.base import (
    GatewayTransaction,
    PaymentOutcome,
    PaymentRequest,
)

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convert a 2-place decimal amount to cents."""
    return int((amount * 100).to_integral_value())


def map_intent_status(payment_intent: Any) -> PaymentOutcome:
    """
    Translate a PaymentIntent into a settlement outcome.

    An intent back in requires_payment_method after an attempt has failed;
    before any attempt it is simply waiting for the customer.
    """
    status = payment_intent.get("status")
    if status == "succeeded":
        return PaymentOutcome.SUCCEEDED
    if status == "canceled":
        return PaymentOutcome.FAILED
    if status == "requires_payment_method" and payment_intent.get(
        "last_payment_error"
    ):
        return PaymentOutcome.FAILED
    return PaymentOutcome.PENDING


class StripeGateway:
    """
    Stripe gateway implementing the PaymentGateway protocol.

    The PaymentIntent client_secret is the token the customer device
    confirms with; the intent id (pi_xxx) is the reference.
    """

    def __init__(
        self,
        api_key: str | None = None,
        currency: str | None = None,
    ) -> None:
        self._api_key = api_key or settings.STRIPE_SECRET_KEY
        self._currency = currency

    @property
    def name(self) -> str:
        return "stripe"

    def close(self) -> None:
        """Nothing to release; the SDK manages its own connections."""

    def create_transaction(self, request: PaymentRequest) -> GatewayTransaction:
        """
        Create a PaymentIntent for the order.

        Raises:
            GatewayUnavailable: If the Stripe API call fails
        """
        try:
            intent = stripe.PaymentIntent.create(
                amount=to_minor_units(request.amount),
                currency=self._currency or request.currency,
                automatic_payment_methods={"enabled": True},
                metadata={"order_id": request.order_id},
                description=f"Order {request.order_id} ({request.customer_name})",
                api_key=self._api_key,
            )
        except stripe.StripeError as e:
            logger.warning(
                "Stripe PaymentIntent create failed: order_id=%s error=%s",
                request.order_id,
                e,
            )
            raise GatewayUnavailable(
                str(e.user_message or e),
                gateway=self.name,
                status_code=e.http_status,
            ) from e

        logger.info(
            "Stripe PaymentIntent created: order_id=%s intent=%s",
            request.order_id,
            intent.id,
        )
        return GatewayTransaction(token=intent.client_secret, reference=intent.id)

    def fetch_outcome(self, reference: str) -> PaymentOutcome:
        try:
            intent = stripe.PaymentIntent.retrieve(reference, api_key=self._api_key)
        except stripe.StripeError as e:
            raise GatewayUnavailable(
                str(e.user_message or e),
                gateway=self.name,
                status_code=e.http_status,
            ) from e
        return map_intent_status(intent)
