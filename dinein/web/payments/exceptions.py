"""Payment gateway exceptions."""


class PaymentError(Exception):
    """Base exception for payment gateway errors."""

    code = "payment_error"

    def __init__(self, message: str, gateway: str | None = None) -> None:
        self.message = message
        self.gateway = gateway
        super().__init__(message)


class GatewayUnavailable(PaymentError):
    """
    Gateway could not be reached, timed out, or refused the request.

    The order is left untouched; the customer can retry initiation.
    """

    code = "gateway_unavailable"

    def __init__(
        self,
        message: str,
        gateway: str | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message, gateway)
        self.status_code = status_code
        self.response_body = response_body


class GatewayError(PaymentError):
    """Inbound gateway data (notification, signature) could not be trusted."""

    code = "gateway_error"
