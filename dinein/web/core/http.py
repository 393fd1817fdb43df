"""
JSON response helpers shared by the API views.

Every error leaves the API in one envelope:
    {"error": <code>, "message": <text>, "details": [...]}
"""

import json
from typing import Any, TypeVar

from django.http import HttpRequest, JsonResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from dinein.web.payments.exceptions import (
    GatewayError,
    GatewayUnavailable,
    PaymentError,
)
from dinein.web.restaurant.exceptions import (
    Forbidden,
    IllegalTransition,
    InvalidInput,
    NotFound,
    OrderError,
)
from dinein.web.restaurant.serializers import ErrorResponse, ValidationErrorResponse

# Most specific first; EmptyCart falls under InvalidInput
ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (InvalidInput, 400),
    (NotFound, 404),
    (IllegalTransition, 409),
    (Forbidden, 403),
    (GatewayUnavailable, 503),
    (GatewayError, 400),
]

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class BadRequest(Exception):
    """Request body could not be parsed into the expected schema."""

    def __init__(self, details: list[dict[str, Any]], message: str) -> None:
        self.details = details
        self.message = message
        super().__init__(message)


def cors_headers() -> dict[str, str]:
    """CORS headers for the customer ordering client."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Idempotency-Key",
    }


def json_response(data: dict[str, Any], status: int = 200) -> JsonResponse:
    """Create a JSON response with CORS headers."""
    response = JsonResponse(data, status=status)
    for key, value in cors_headers().items():
        response[key] = value
    return response


def error_response(
    code: str,
    message: str,
    status: int,
    details: list[dict[str, Any]] | None = None,
) -> JsonResponse:
    body = ErrorResponse(error=code, message=message, details=details or [])
    return json_response(body.model_dump(mode="json"), status=status)


def exception_response(exc: OrderError | PaymentError) -> JsonResponse:
    """Translate an engine or gateway exception into the error envelope."""
    status = next(
        (code for cls, code in ERROR_STATUS if isinstance(exc, cls)),
        500,
    )
    details = getattr(exc, "details", None)
    return error_response(exc.code, exc.message, status, details)


def parse_body(request: HttpRequest, schema: type[SchemaT]) -> SchemaT:
    """
    Decode a JSON request body and validate it against a pydantic schema.

    An empty body validates as {} so schemas with defaults need no body.

    Raises:
        BadRequest: If the body is not JSON or fails validation
    """
    try:
        body = json.loads(request.body) if request.body else {}
    except json.JSONDecodeError as e:
        raise BadRequest([], "Invalid JSON in request body") from e

    try:
        return schema.model_validate(body)
    except PydanticValidationError as e:
        details = [
            {
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        raise BadRequest(details, "Invalid request") from e


def bad_request_response(exc: BadRequest) -> JsonResponse:
    body = ValidationErrorResponse.model_validate(
        {"error": "validation_error", "message": exc.message, "details": exc.details}
    )
    return json_response(body.model_dump(mode="json"), status=400)
