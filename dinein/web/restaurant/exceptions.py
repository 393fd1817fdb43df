"""Order engine exceptions."""

from typing import Any


class OrderError(Exception):
    """Base exception for order lifecycle errors."""

    code = "order_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInput(OrderError):
    """Malformed request; rejected before any write."""

    code = "validation_error"

    def __init__(
        self,
        message: str,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details or []


class EmptyCart(InvalidInput):
    """Checkout attempted with no lines."""

    code = "empty_cart"


class NotFound(OrderError):
    """Unknown order id."""

    code = "not_found"

    def __init__(self, message: str, order_id: Any = None) -> None:
        super().__init__(message)
        self.order_id = order_id


class IllegalTransition(OrderError):
    """Requested status is not reachable from the current one."""

    code = "illegal_transition"

    def __init__(
        self,
        message: str,
        current: str | None = None,
        target: str | None = None,
    ) -> None:
        super().__init__(message)
        self.current = current
        self.target = target


class Forbidden(OrderError):
    """Actor role lacks permission for the requested change."""

    code = "forbidden"
