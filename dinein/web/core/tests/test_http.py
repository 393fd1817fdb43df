"""Tests for JSON response helpers."""

import json

import pytest
from pydantic import BaseModel, Field

from dinein.web.core.http import BadRequest, exception_response, parse_body
from dinein.web.payments.exceptions import GatewayError, GatewayUnavailable
from dinein.web.restaurant.exceptions import (
    EmptyCart,
    Forbidden,
    IllegalTransition,
    InvalidInput,
    NotFound,
)


class _Body(BaseModel):
    name: str
    count: int = Field(default=1, ge=1)


class TestParseBody:
    def test_valid(self, rf):
        request = rf.post(
            "/", data=json.dumps({"name": "x"}), content_type="application/json"
        )

        assert parse_body(request, _Body) == _Body(name="x", count=1)

    def test_invalid_json(self, rf):
        request = rf.post("/", data="{", content_type="application/json")

        with pytest.raises(BadRequest, match="Invalid JSON"):
            parse_body(request, _Body)

    def test_field_errors(self, rf):
        request = rf.post(
            "/", data=json.dumps({"count": 0}), content_type="application/json"
        )

        with pytest.raises(BadRequest) as exc_info:
            parse_body(request, _Body)

        fields = {d["field"] for d in exc_info.value.details}
        assert fields == {"name", "count"}


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (InvalidInput("bad", [{"field": "x", "message": "m"}]), 400, "validation_error"),
        (EmptyCart("empty"), 400, "empty_cart"),
        (NotFound("missing"), 404, "not_found"),
        (IllegalTransition("nope"), 409, "illegal_transition"),
        (Forbidden("no"), 403, "forbidden"),
        (GatewayUnavailable("down", "snap"), 503, "gateway_unavailable"),
        (GatewayError("forged", "snap"), 400, "gateway_error"),
    ],
)
def test_exception_response(exc, status, code):
    response = exception_response(exc)

    assert response.status_code == status
    body = json.loads(response.content)
    assert body["error"] == code
    assert body["message"] == exc.message
    assert response["Access-Control-Allow-Origin"] == "*"
