"""Tests for payment gateway webhook handlers."""

import hashlib
import json
import uuid
from unittest.mock import patch

from django.test import Client, TestCase, override_settings

import stripe

from dinein.web.payments.models import CallbackSource, PaymentCallback
from dinein.web.restaurant.models import OrderStatus, PaymentStatus
from dinein.web.restaurant.tests.factories import OrderFactory


@override_settings(STRIPE_WEBHOOK_SECRET="whsec_test123")
class TestStripeWebhook(TestCase):
    """Tests for the Stripe webhook endpoint."""

    def setUp(self):
        self.http_client = Client()
        self.url = "/payments/webhooks/stripe"

    def _event(self, event_type: str, order_id: str | None, **intent) -> dict:
        metadata = {"order_id": order_id} if order_id else {}
        return {
            "id": "evt_test",
            "type": event_type,
            "data": {"object": {"id": "pi_test123", "metadata": metadata, **intent}},
        }

    def _post(self, signature: str = "valid"):
        return self.http_client.post(
            self.url,
            data=json.dumps({"type": "ignored"}),
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=signature,
        )

    @patch("stripe.Webhook.construct_event")
    def test_payment_succeeded_marks_order_paid(self, mock_construct):
        order = OrderFactory()
        mock_construct.return_value = self._event(
            "payment_intent.succeeded", str(order.pk)
        )

        response = self._post()

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.status == OrderStatus.PAID
        assert order.payment_status == PaymentStatus.PAID

        callback = PaymentCallback.objects.get()
        assert callback.gateway == "stripe"
        assert callback.reference == "pi_test123"
        assert callback.source == CallbackSource.WEBHOOK
        assert callback.payload["event_id"] == "evt_test"

    @patch("stripe.Webhook.construct_event")
    def test_payment_succeeded_idempotent(self, mock_construct):
        order = OrderFactory(
            status=OrderStatus.PREPARING,
            payment_status=PaymentStatus.PAID,
        )
        mock_construct.return_value = self._event(
            "payment_intent.succeeded", str(order.pk)
        )

        response = self._post()

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.status == OrderStatus.PREPARING
        assert PaymentCallback.objects.get().applied is False

    @patch("stripe.Webhook.construct_event")
    def test_payment_failed_keeps_order_pending(self, mock_construct):
        order = OrderFactory()
        mock_construct.return_value = self._event(
            "payment_intent.payment_failed",
            str(order.pk),
            last_payment_error={"message": "Card declined"},
        )

        response = self._post()

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.FAILED

    @patch("stripe.Webhook.construct_event")
    def test_unknown_order_still_acknowledged(self, mock_construct):
        missing = str(uuid.uuid4())
        mock_construct.return_value = self._event("payment_intent.succeeded", missing)

        response = self._post()

        assert response.status_code == 200
        assert PaymentCallback.objects.get().order_ref == missing

    @patch("stripe.Webhook.construct_event")
    def test_missing_order_id(self, mock_construct):
        mock_construct.return_value = self._event("payment_intent.succeeded", None)

        response = self._post()

        assert response.status_code == 200
        assert PaymentCallback.objects.count() == 0

    @patch("stripe.Webhook.construct_event")
    def test_unhandled_event_type(self, mock_construct):
        mock_construct.return_value = {"type": "charge.refunded", "data": {}}

        response = self._post()

        assert response.status_code == 200

    @patch("stripe.Webhook.construct_event")
    def test_invalid_signature(self, mock_construct):
        mock_construct.side_effect = stripe.SignatureVerificationError(
            "Invalid signature", "sig_header"
        )

        response = self._post(signature="invalid")

        assert response.status_code == 400

    @patch("stripe.Webhook.construct_event")
    def test_invalid_payload(self, mock_construct):
        mock_construct.side_effect = ValueError("Invalid payload")

        response = self._post()

        assert response.status_code == 400

    def test_get_not_allowed(self):
        response = self.http_client.get(self.url)

        assert response.status_code == 405


SNAP_KEY = "SB-Mid-server-test"


@override_settings(SNAP_SERVER_KEY=SNAP_KEY)
class TestSnapWebhook(TestCase):
    """Tests for the Snap notification endpoint."""

    def setUp(self):
        self.http_client = Client()
        self.url = "/payments/webhooks/snap"

    def _notification(self, order_id, transaction_status="settlement", **extra):
        payload = {
            "order_id": f"ORDER-{order_id}-x1y2z3",
            "status_code": "200",
            "gross_amount": "25.98",
            "transaction_status": transaction_status,
            **extra,
        }
        raw = (
            payload["order_id"]
            + payload["status_code"]
            + payload["gross_amount"]
            + SNAP_KEY
        )
        payload["signature_key"] = hashlib.sha512(raw.encode()).hexdigest()
        return payload

    def _post(self, payload):
        return self.http_client.post(
            self.url,
            data=json.dumps(payload),
            content_type="application/json",
        )

    def test_settlement_marks_order_paid(self):
        order = OrderFactory()

        response = self._post(self._notification(order.pk))

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.status == OrderStatus.PAID
        callback = PaymentCallback.objects.get()
        assert callback.gateway == "snap"
        assert callback.reference == f"ORDER-{order.pk}-x1y2z3"

    def test_expired_marks_payment_failed(self):
        order = OrderFactory()

        response = self._post(self._notification(order.pk, "expire"))

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.FAILED

    def test_challenged_capture_waits(self):
        order = OrderFactory()

        response = self._post(
            self._notification(order.pk, "capture", fraud_status="challenge")
        )

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.payment_status == PaymentStatus.PENDING

    def test_bad_signature_rejected(self):
        order = OrderFactory()
        payload = self._notification(order.pk)
        payload["signature_key"] = "0" * 128

        response = self._post(payload)

        assert response.status_code == 400
        order.refresh_from_db()
        assert order.status == OrderStatus.PENDING
        assert PaymentCallback.objects.count() == 0

    def test_invalid_json(self):
        response = self.http_client.post(
            self.url, data="not json", content_type="application/json"
        )

        assert response.status_code == 400

    def test_unknown_order_still_acknowledged(self):
        response = self._post(self._notification(uuid.uuid4()))

        assert response.status_code == 200
        assert PaymentCallback.objects.get().order is None
