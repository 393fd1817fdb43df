"""Snap payment gateway - hosted checkout page with server-side status API."""

import hashlib
import hmac
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import httpx
from django.conf import settings
from django.utils.crypto import get_random_string

from dinein.web.payments.exceptions import GatewayError, GatewayUnavailable
from dinein.web.payments.gateways.base import (
    GatewayTransaction,
    PaymentOutcome,
    PaymentRequest,
)

logger = logging.getLogger(__name__)

# transaction_status values reported by the status API and notifications
STATUS_MAP: dict[str, PaymentOutcome] = {
    "settlement": PaymentOutcome.SUCCEEDED,
    "pending": PaymentOutcome.PENDING,
    "authorize": PaymentOutcome.PENDING,
    "deny": PaymentOutcome.FAILED,
    "cancel": PaymentOutcome.FAILED,
    "expire": PaymentOutcome.FAILED,
    "failure": PaymentOutcome.FAILED,
}


def map_transaction_status(
    transaction_status: str, fraud_status: str | None = None
) -> PaymentOutcome:
    """
    Translate a Snap transaction status into a settlement outcome.

    Card captures are only final once the fraud check accepts them.
    Statuses we do not know (refunds, chargebacks) never settle an order.
    """
    if transaction_status == "capture":
        match fraud_status:
            case None | "" | "accept":
                return PaymentOutcome.SUCCEEDED
            case "deny":
                return PaymentOutcome.FAILED
            case _:
                return PaymentOutcome.PENDING
    return STATUS_MAP.get(transaction_status, PaymentOutcome.PENDING)


def _amount(value: Decimal) -> int | float:
    """Snap wants plain JSON numbers; whole amounts go out as integers."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True)
class SnapNotification:
    """A verified HTTP notification from Snap."""

    order_id: str
    reference: str
    outcome: PaymentOutcome
    transaction_status: str


class SnapGateway:
    """
    Snap gateway implementing the PaymentGateway protocol.

    Opens transactions on the Snap API (the customer pays on the hosted
    page) and looks up their status on the core API. Notifications are
    verified with the SHA-512 signature Snap attaches to each one.

    Each transaction gets a fresh gateway order id of the form
    ORDER-<order uuid>-<suffix>, so a retried payment never collides with
    an earlier attempt for the same order.
    """

    SANDBOX_APP_URL = "https://app.sandbox.midtrans.com"
    PROD_APP_URL = "https://app.midtrans.com"
    SANDBOX_API_URL = "https://api.sandbox.midtrans.com"
    PROD_API_URL = "https://api.midtrans.com"

    ORDER_PREFIX = "ORDER-"
    ENABLED_PAYMENTS = ["credit_card", "gopay", "shopeepay", "bank_transfer"]

    def __init__(
        self,
        server_key: str | None = None,
        http_client: httpx.Client | None = None,
        sandbox: bool | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the Snap gateway.

        Args:
            server_key: Server key (defaults to settings.SNAP_SERVER_KEY).
            http_client: Optional HTTP client for dependency injection (testing).
            sandbox: If True, use the sandbox environment
                (defaults to settings.SNAP_SANDBOX).
            timeout: Request timeout in seconds
                (defaults to settings.PAYMENT_GATEWAY_TIMEOUT).
        """
        self._server_key = (
            server_key if server_key is not None else settings.SNAP_SERVER_KEY
        )
        self._sandbox = settings.SNAP_SANDBOX if sandbox is None else sandbox
        self._timeout = timeout or settings.PAYMENT_GATEWAY_TIMEOUT
        self._client = http_client or httpx.Client(timeout=self._timeout)
        self._owns_client = http_client is None
        self._app_url = self.SANDBOX_APP_URL if self._sandbox else self.PROD_APP_URL
        self._api_url = self.SANDBOX_API_URL if self._sandbox else self.PROD_API_URL

    @property
    def name(self) -> str:
        return "snap"

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client:
            self._client.close()

    # =========================================================================
    # Transactions
    # =========================================================================

    def create_transaction(self, request: PaymentRequest) -> GatewayTransaction:
        """
        Open a Snap transaction for the order.

        Returns:
            Snap token, gateway order id as reference, and the hosted page URL.

        Raises:
            GatewayUnavailable: If the key is missing, the call fails or times
                out, or Snap answers without a token.
        """
        self._require_key()
        reference = self.make_reference(request.order_id)

        payload = {
            "transaction_details": {
                "order_id": reference,
                "gross_amount": _amount(request.amount),
            },
            "item_details": [
                {
                    "id": item.id,
                    "price": _amount(item.price),
                    "quantity": item.quantity,
                    "name": item.name[:50],
                }
                for item in request.items
            ],
            "customer_details": {"first_name": request.customer_name},
            "enabled_payments": self.ENABLED_PAYMENTS,
            "credit_card": {"secure": True},
        }

        data = self._request(
            "POST", f"{self._app_url}/snap/v1/transactions", json=payload
        )

        token = data.get("token")
        if not token:
            raise GatewayUnavailable(
                "Snap response did not include a token",
                gateway=self.name,
                response_body=str(data),
            )

        logger.info(
            "Snap transaction created: order_id=%s reference=%s",
            request.order_id,
            reference,
        )
        return GatewayTransaction(
            token=str(token),
            reference=reference,
            redirect_url=data.get("redirect_url"),
        )

    def fetch_outcome(self, reference: str) -> PaymentOutcome:
        """
        Look up a transaction on the status API.

        A transaction the customer never started is reported as pending.
        """
        self._require_key()
        data = self._request("GET", f"{self._api_url}/v2/{reference}/status")

        # The status API answers 200 with an embedded status_code
        if str(data.get("status_code", "")) == "404":
            logger.info("Snap has no transaction yet for %s", reference)
            return PaymentOutcome.PENDING

        outcome = map_transaction_status(
            str(data.get("transaction_status", "")),
            data.get("fraud_status"),
        )
        logger.info(
            "Snap status for %s: %s -> %s",
            reference,
            data.get("transaction_status"),
            outcome,
        )
        return outcome

    # =========================================================================
    # Notifications
    # =========================================================================

    def verify_signature(self, payload: dict[str, Any]) -> bool:
        """
        Check the signature_key of a notification.

        Snap signs sha512(order_id + status_code + gross_amount + server_key).
        """
        if not self._server_key:
            return False
        signature = payload.get("signature_key")
        if not isinstance(signature, str):
            return False
        raw = "".join(
            [
                str(payload.get("order_id", "")),
                str(payload.get("status_code", "")),
                str(payload.get("gross_amount", "")),
                self._server_key,
            ]
        )
        expected = hashlib.sha512(raw.encode()).hexdigest()
        return hmac.compare_digest(expected, signature)

    def parse_notification(self, payload: dict[str, Any]) -> SnapNotification:
        """
        Verify and parse a notification body.

        Raises:
            GatewayError: If the signature is wrong or the body is incomplete.
        """
        if not self.verify_signature(payload):
            raise GatewayError("Invalid Snap notification signature", gateway=self.name)

        reference = payload.get("order_id")
        transaction_status = payload.get("transaction_status")
        if not reference or not transaction_status:
            raise GatewayError(
                "Snap notification is missing order_id or transaction_status",
                gateway=self.name,
            )

        return SnapNotification(
            order_id=self.order_id_from_reference(str(reference)),
            reference=str(reference),
            outcome=map_transaction_status(
                str(transaction_status), payload.get("fraud_status")
            ),
            transaction_status=str(transaction_status),
        )

    # =========================================================================
    # References
    # =========================================================================

    @classmethod
    def make_reference(cls, order_id: str) -> str:
        return f"{cls.ORDER_PREFIX}{order_id}-{get_random_string(6)}"

    @classmethod
    def order_id_from_reference(cls, reference: str) -> str:
        """
        Recover our order id from a gateway order id.

        Raises:
            GatewayError: If the reference was not issued by this gateway.
        """
        if not reference.startswith(cls.ORDER_PREFIX):
            raise GatewayError(f"Unrecognized Snap order id: {reference}", "snap")
        candidate = reference[len(cls.ORDER_PREFIX) :][:36]
        try:
            return str(uuid.UUID(candidate))
        except ValueError as e:
            raise GatewayError(f"Unrecognized Snap order id: {reference}", "snap") from e

    # =========================================================================
    # Internal
    # =========================================================================

    def _require_key(self) -> None:
        if not self._server_key:
            raise GatewayUnavailable("Snap server key not configured", gateway=self.name)

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Send an authenticated request and decode the JSON body."""
        try:
            response = self._client.request(
                method,
                url,
                auth=(self._server_key, ""),
                headers={"Accept": "application/json"},
                timeout=self._timeout,
                **kwargs,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Snap API error: %s %s -> %s",
                method,
                url,
                e.response.status_code,
            )
            raise GatewayUnavailable(
                f"Snap API error: {e.response.status_code}",
                gateway=self.name,
                status_code=e.response.status_code,
                response_body=e.response.text,
            ) from e
        except httpx.RequestError as e:
            logger.warning("Snap request failed: %s %s: %s", method, url, e)
            raise GatewayUnavailable(
                f"Snap request failed: {e}", gateway=self.name
            ) from e
        except ValueError as e:
            raise GatewayUnavailable(
                "Snap returned a non-JSON response", gateway=self.name
            ) from e

        if not isinstance(data, dict):
            raise GatewayUnavailable("Snap returned an unexpected body", self.name)
        return data
