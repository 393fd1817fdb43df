"""
Payment gateway webhook handlers.

Handles settlement notifications from:
- Stripe: payment_intent.succeeded / payment_failed / canceled / processing
- Snap: HTTP notifications carrying transaction_status

A notification that passes verification always gets a 200, even when it
names an unknown order, so the gateway does not retry it forever.
"""

import json
import logging
from typing import Any

import stripe
from django.conf import settings
from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from dinein.web.payments.exceptions import GatewayError
from dinein.web.payments.gateways import PaymentOutcome, SnapGateway
from dinein.web.payments.models import CallbackSource
from dinein.web.payments.services import on_payment_settled
from dinein.web.restaurant.exceptions import NotFound

logger = logging.getLogger(__name__)

STRIPE_EVENT_OUTCOMES: dict[str, PaymentOutcome] = {
    "payment_intent.succeeded": PaymentOutcome.SUCCEEDED,
    "payment_intent.payment_failed": PaymentOutcome.FAILED,
    "payment_intent.canceled": PaymentOutcome.FAILED,
    "payment_intent.processing": PaymentOutcome.PENDING,
}


def _settle(
    order_id: str,
    outcome: PaymentOutcome,
    gateway: str,
    reference: str,
    payload: dict[str, Any],
) -> None:
    try:
        on_payment_settled(
            order_id,
            outcome,
            source=CallbackSource.WEBHOOK,
            gateway=gateway,
            reference=reference,
            payload=payload,
        )
    except NotFound:
        logger.error(
            "Order not found for %s notification: order_id=%s reference=%s",
            gateway,
            order_id,
            reference,
        )


@csrf_exempt
@require_POST
def stripe_webhook(request: HttpRequest) -> HttpResponse:
    """
    Handle Stripe webhook events.

    POST /payments/webhooks/stripe
    """
    payload = request.body
    sig_header = request.headers.get("Stripe-Signature", "")

    # Verify webhook signature
    try:
        event = stripe.Webhook.construct_event(
            payload,
            sig_header,
            settings.STRIPE_WEBHOOK_SECRET,
        )
    except ValueError as e:
        logger.warning("Invalid Stripe webhook payload: %s", e)
        return HttpResponse("Invalid payload", status=400)
    except stripe.SignatureVerificationError as e:
        logger.warning("Invalid Stripe webhook signature: %s", e)
        return HttpResponse("Invalid signature", status=400)

    logger.info("Received Stripe event: %s", event["type"])

    outcome = STRIPE_EVENT_OUTCOMES.get(event["type"])
    if outcome is None:
        logger.debug("Ignoring unhandled Stripe event: %s", event["type"])
        return HttpResponse(status=200)

    payment_intent = event["data"]["object"]
    metadata = payment_intent.get("metadata") or {}
    order_id = metadata.get("order_id")
    if not order_id:
        logger.warning(
            "Stripe %s without order_id in metadata: %s",
            event["type"],
            payment_intent.get("id"),
        )
        return HttpResponse(status=200)

    _settle(
        str(order_id),
        outcome,
        gateway="stripe",
        reference=str(payment_intent.get("id", "")),
        payload={"event_id": event.get("id"), "type": event["type"]},
    )
    return HttpResponse(status=200)


@csrf_exempt
@require_POST
def snap_webhook(request: HttpRequest) -> HttpResponse:
    """
    Handle Snap HTTP notifications.

    POST /payments/webhooks/snap
    """
    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        logger.warning("Invalid Snap notification payload: %s", e)
        return HttpResponse("Invalid payload", status=400)
    if not isinstance(data, dict):
        return HttpResponse("Invalid payload", status=400)

    gateway = SnapGateway()
    try:
        notification = gateway.parse_notification(data)
    except GatewayError as e:
        logger.warning("Rejected Snap notification: %s", e.message)
        return HttpResponse(e.message, status=400)
    finally:
        gateway.close()

    logger.info(
        "Received Snap notification: reference=%s status=%s",
        notification.reference,
        notification.transaction_status,
    )
    _settle(
        notification.order_id,
        notification.outcome,
        gateway="snap",
        reference=notification.reference,
        payload=data,
    )
    return HttpResponse(status=200)
