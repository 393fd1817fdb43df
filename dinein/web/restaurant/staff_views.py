"""
Staff order API views - kitchen, cashier and manager screens.

All endpoints require a signed-in user with a staff role. Which status
changes a role may make is decided by restaurant.transitions.
"""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from dinein.web.core.decorators import staff_required
from dinein.web.core.http import (
    BadRequest,
    bad_request_response,
    exception_response,
    json_response,
    parse_body,
)
from dinein.web.core.roles import resolve_role
from dinein.web.restaurant.exceptions import OrderError
from dinein.web.restaurant.serializers import OrderListResponse, TransitionRequest
from dinein.web.restaurant.services import list_orders, transition
from dinein.web.restaurant.views import serialize_order


@require_GET
@staff_required
def order_list(request: HttpRequest) -> JsonResponse:
    """
    GET /api/staff/orders?status=paid,preparing&q=smith&board=kitchen

    status may be repeated or comma separated; q searches id, customer
    name and table number; board picks a named projection.
    """
    statuses = [
        status
        for value in request.GET.getlist("status")
        for status in value.split(",")
        if status
    ]
    try:
        orders = list_orders(
            statuses=statuses,
            search=request.GET.get("q", ""),
            board=request.GET.get("board") or None,
        )
    except OrderError as e:
        return exception_response(e)

    serialized = [serialize_order(order) for order in orders]
    response = OrderListResponse(orders=serialized, count=len(serialized))
    return json_response(response.model_dump(mode="json"))


@require_POST
@staff_required
def order_transition(request: HttpRequest, order_id: str) -> JsonResponse:
    """
    POST /api/staff/orders/{order_id}/transition

    Request body: {"status": "<target>"}
    Response: the order after the change (200); 403, 404 or 409 on refusal
    """
    try:
        body = parse_body(request, TransitionRequest)
    except BadRequest as e:
        return bad_request_response(e)

    try:
        order = transition(order_id, body.status, resolve_role(request.user))
    except OrderError as e:
        return exception_response(e)

    return json_response(serialize_order(order).model_dump(mode="json"))
