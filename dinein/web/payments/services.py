"""
Payment services - reconciles orders with an asynchronous payment gateway.

Handles:
1. Opening a gateway transaction for a pending order (initiate_payment)
2. Applying settlement reports from webhooks, devices and sweeps
   (on_payment_settled), idempotently and with compare-and-set writes
3. Asking the gateway for the authoritative outcome (verify_and_settle)
"""

import logging
from datetime import timedelta
from typing import Any

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from dinein.web.payments.gateways import (
    GatewayTransaction,
    PaymentGateway,
    PaymentOutcome,
    PaymentRequest,
    get_gateway,
)
from dinein.web.payments.models import CallbackSource, PaymentCallback
from dinein.web.realtime.notifier import EntityKind, publish_on_commit
from dinein.web.restaurant.exceptions import IllegalTransition, NotFound
from dinein.web.restaurant.models import Order, OrderStatus, PaymentStatus
from dinein.web.restaurant.services import get_order

logger = logging.getLogger(__name__)


def initiate_payment(
    order: Order, gateway: PaymentGateway | None = None
) -> GatewayTransaction:
    """
    Open a gateway transaction for an order.

    Stores the token and reference on the order; the order status does not
    change. Calling it again (after a gateway failure or an abandoned payment
    page) opens a fresh transaction.

    Args:
        order: Order to charge
        gateway: Gateway to use (defaults to settings.PAYMENT_GATEWAY)

    Returns:
        The new transaction (token, reference, optional redirect URL)

    Raises:
        IllegalTransition: If the order is not pending or is already paid
        GatewayUnavailable: If the gateway cannot open the transaction
    """
    if (
        order.status != OrderStatus.PENDING
        or order.payment_status == PaymentStatus.PAID
    ):
        raise IllegalTransition(
            "Payment can only be started for an unpaid pending order",
            current=order.status,
        )

    owns_gateway = gateway is None
    gateway = gateway or get_gateway()
    try:
        request = PaymentRequest.from_order(order, currency=settings.PAYMENT_CURRENCY)
        txn = gateway.create_transaction(request)
    finally:
        if owns_gateway:
            gateway.close()

    with transaction.atomic():
        changed = (
            Order.objects.filter(pk=order.pk, status=OrderStatus.PENDING)
            .exclude(payment_status=PaymentStatus.PAID)
            .update(
                payment_token=txn.token,
                payment_reference=txn.reference,
                payment_gateway=gateway.name,
                updated_at=timezone.now(),
            )
        )
        if not changed:
            order.refresh_from_db()
            logger.warning(
                "Order %s settled while its payment was being opened "
                "(status=%s payment=%s); dropping transaction %s",
                order.pk,
                order.status,
                order.payment_status,
                txn.reference,
            )
            raise IllegalTransition(
                "Order is no longer awaiting payment", current=order.status
            )
        publish_on_commit(EntityKind.ORDER, order.pk)

    order.payment_token = txn.token
    order.payment_reference = txn.reference
    order.payment_gateway = gateway.name

    logger.info(
        "Payment initiated: order_id=%s gateway=%s reference=%s",
        order.pk,
        gateway.name,
        txn.reference,
    )
    return txn


def _apply_success(order_id: Any) -> bool:
    now = timezone.now()
    changed = Order.objects.filter(pk=order_id, status=OrderStatus.PENDING).update(
        status=OrderStatus.PAID,
        payment_status=PaymentStatus.PAID,
        updated_at=now,
    )
    if changed:
        logger.info("Order paid via gateway: order_id=%s", order_id)
        return True

    # Cancelled before the money arrived: record it once, keep it cancelled
    changed = (
        Order.objects.filter(pk=order_id, status=OrderStatus.CANCELLED)
        .exclude(payment_status=PaymentStatus.PAID)
        .update(payment_status=PaymentStatus.PAID, updated_at=now)
    )
    if changed:
        logger.warning(
            "Payment succeeded for cancelled order %s; refund needed", order_id
        )
        return True

    logger.info("Order already settled, skipping: order_id=%s", order_id)
    return False


def _apply_failure(order_id: Any) -> bool:
    changed = (
        Order.objects.filter(pk=order_id, status=OrderStatus.PENDING)
        .exclude(payment_status__in=[PaymentStatus.FAILED, PaymentStatus.PAID])
        .update(payment_status=PaymentStatus.FAILED, updated_at=timezone.now())
    )
    if changed:
        logger.info("Payment failed: order_id=%s", order_id)
        return True

    logger.info("Ignoring payment failure: order_id=%s", order_id)
    return False


def on_payment_settled(
    order_id: Any,
    outcome: PaymentOutcome | str,
    source: str = CallbackSource.WEBHOOK,
    gateway: str = "",
    reference: str = "",
    payload: dict[str, Any] | None = None,
) -> bool:
    """
    Apply a settlement report to an order.

    succeeded: pending -> paid (payment paid). An order already paid or
        beyond is left alone. A cancelled order records payment paid once
        and stays cancelled.
    failed: payment failed, only while the order is pending and not
        already failed. The order stays pending so the customer can retry.
    pending: informational only.

    Repeated reports change nothing and publish nothing. Every report is
    kept as a PaymentCallback row.

    Returns:
        True if the order changed

    Raises:
        NotFound: If the order does not exist
        ValueError: If outcome is not a known outcome
    """
    outcome = PaymentOutcome(outcome)

    try:
        order = get_order(order_id)
    except NotFound:
        PaymentCallback.objects.create(
            order=None,
            order_ref=str(order_id)[:64],
            gateway=gateway,
            reference=reference,
            outcome=outcome,
            source=source,
            payload=payload or {},
        )
        raise

    with transaction.atomic():
        match outcome:
            case PaymentOutcome.SUCCEEDED:
                applied = _apply_success(order.pk)
            case PaymentOutcome.FAILED:
                applied = _apply_failure(order.pk)
            case _:
                logger.info("Payment still pending: order_id=%s", order.pk)
                applied = False

        PaymentCallback.objects.create(
            order=order,
            order_ref=str(order.pk),
            gateway=gateway or order.payment_gateway,
            reference=reference or order.payment_reference,
            outcome=outcome,
            source=source,
            payload=payload or {},
            applied=applied,
        )
        if applied:
            publish_on_commit(EntityKind.ORDER, order.pk)

    return applied


def verify_and_settle(
    order: Order,
    source: str = CallbackSource.CLIENT,
    gateway: PaymentGateway | None = None,
) -> PaymentOutcome:
    """
    Ask the gateway how the order's transaction ended and apply it.

    Used when a device reports completion (the device is never trusted on
    its own) and by the reconcile_payments sweep.

    Raises:
        IllegalTransition: If no payment was ever started for the order
        GatewayUnavailable: If the lookup fails
    """
    if not order.payment_reference:
        raise IllegalTransition(
            "No payment has been started for this order", current=order.status
        )

    owns_gateway = gateway is None
    gateway = gateway or get_gateway(order.payment_gateway or None)
    try:
        outcome = gateway.fetch_outcome(order.payment_reference)
    finally:
        if owns_gateway:
            gateway.close()

    on_payment_settled(
        order.pk,
        outcome,
        source=source,
        gateway=gateway.name,
        reference=order.payment_reference,
        payload={"verified": True},
    )
    order.refresh_from_db()
    return outcome


def stale_pending_orders(older_than: timedelta) -> QuerySet[Order]:
    """Pending orders with an open transaction not touched for older_than."""
    cutoff = timezone.now() - older_than
    return (
        Order.objects.filter(status=OrderStatus.PENDING, updated_at__lt=cutoff)
        .exclude(payment_reference="")
        .exclude(payment_status=PaymentStatus.PAID)
        .order_by("updated_at")
    )
