"""Mock payment gateway for development and testing."""

import logging

from dinein.web.payments.exceptions import GatewayUnavailable
from dinein.web.payments.gateways.base import (
    GatewayTransaction,
    PaymentOutcome,
    PaymentRequest,
)

logger = logging.getLogger(__name__)


class MockGateway:
    """
    Deterministic in-process gateway.

    Tokens and references are derived from the order id. Every outcome
    lookup answers with the configured outcome, so development setups can
    walk an order through payment without network access.
    """

    def __init__(
        self,
        outcome: PaymentOutcome = PaymentOutcome.SUCCEEDED,
        fail_create: bool = False,
    ) -> None:
        self.outcome = outcome
        self.fail_create = fail_create
        self.requests: list[PaymentRequest] = []

    @property
    def name(self) -> str:
        return "mock"

    def close(self) -> None:
        pass

    def create_transaction(self, request: PaymentRequest) -> GatewayTransaction:
        if self.fail_create:
            raise GatewayUnavailable("Mock gateway is configured to fail", self.name)

        self.requests.append(request)
        logger.debug("Mock transaction for order %s", request.order_id)
        return GatewayTransaction(
            token=f"mock-token-{request.order_id}",
            reference=f"mock-{request.order_id}",
            redirect_url=f"https://pay.example.test/{request.order_id}",
        )

    def fetch_outcome(self, reference: str) -> PaymentOutcome:
        return self.outcome
