"""Tests for StripeGateway."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import stripe

from dinein.web.payments.exceptions import GatewayUnavailable
from dinein.web.payments.gateways import (
    PaymentGateway,
    PaymentOutcome,
    PaymentRequest,
    StripeGateway,
)
from dinein.web.payments.gateways.stripe_gateway import map_intent_status, to_minor_units


@pytest.fixture
def gateway() -> StripeGateway:
    return StripeGateway(api_key="sk_test_123")


@pytest.fixture
def payment_request() -> PaymentRequest:
    return PaymentRequest(
        order_id="order-1",
        amount=Decimal("25.99"),
        customer_name="Alice",
        currency="usd",
    )


class TestCreateTransaction:
    """Tests for StripeGateway.create_transaction."""

    def test_implements_protocol(self, gateway):
        assert isinstance(gateway, PaymentGateway)

    @patch("dinein.web.payments.gateways.stripe_gateway.stripe.PaymentIntent.create")
    def test_success(self, mock_create, gateway, payment_request):
        mock_create.return_value = MagicMock(
            id="pi_test123",
            client_secret="pi_test123_secret_abc",
        )

        txn = gateway.create_transaction(payment_request)

        assert txn.token == "pi_test123_secret_abc"
        assert txn.reference == "pi_test123"
        call_args = mock_create.call_args
        assert call_args[1]["amount"] == 2599
        assert call_args[1]["currency"] == "usd"
        assert call_args[1]["metadata"] == {"order_id": "order-1"}
        assert call_args[1]["api_key"] == "sk_test_123"

    @patch("dinein.web.payments.gateways.stripe_gateway.stripe.PaymentIntent.create")
    def test_currency_override(self, mock_create, payment_request):
        mock_create.return_value = MagicMock(id="pi_1", client_secret="s")

        StripeGateway(api_key="sk_test_123", currency="eur").create_transaction(
            payment_request
        )

        assert mock_create.call_args[1]["currency"] == "eur"

    @patch("dinein.web.payments.gateways.stripe_gateway.stripe.PaymentIntent.create")
    def test_api_error(self, mock_create, gateway, payment_request):
        mock_create.side_effect = stripe.APIConnectionError("Network down")

        with pytest.raises(GatewayUnavailable) as exc_info:
            gateway.create_transaction(payment_request)

        assert exc_info.value.gateway == "stripe"
        assert "Network down" in exc_info.value.message


class TestFetchOutcome:
    """Tests for StripeGateway.fetch_outcome."""

    @patch("dinein.web.payments.gateways.stripe_gateway.stripe.PaymentIntent.retrieve")
    def test_succeeded(self, mock_retrieve, gateway):
        mock_retrieve.return_value = {"id": "pi_1", "status": "succeeded"}

        assert gateway.fetch_outcome("pi_1") == PaymentOutcome.SUCCEEDED
        mock_retrieve.assert_called_once_with("pi_1", api_key="sk_test_123")

    @patch("dinein.web.payments.gateways.stripe_gateway.stripe.PaymentIntent.retrieve")
    def test_invalid_request(self, mock_retrieve, gateway):
        mock_retrieve.side_effect = stripe.InvalidRequestError(
            "No such payment_intent", param="id", http_status=404
        )

        with pytest.raises(GatewayUnavailable) as exc_info:
            gateway.fetch_outcome("pi_missing")

        assert exc_info.value.status_code == 404


@pytest.mark.parametrize(
    ("intent", "expected"),
    [
        ({"status": "succeeded"}, PaymentOutcome.SUCCEEDED),
        ({"status": "processing"}, PaymentOutcome.PENDING),
        ({"status": "requires_payment_method"}, PaymentOutcome.PENDING),
        (
            {
                "status": "requires_payment_method",
                "last_payment_error": {"message": "Card declined"},
            },
            PaymentOutcome.FAILED,
        ),
        ({"status": "canceled"}, PaymentOutcome.FAILED),
    ],
)
def test_map_intent_status(intent, expected):
    assert map_intent_status(intent) == expected


def test_to_minor_units():
    assert to_minor_units(Decimal("12.34")) == 1234
    assert to_minor_units(Decimal("5")) == 500
