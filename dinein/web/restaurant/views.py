"""
Menu and Order API views - public endpoints for the table ordering client.

These endpoints are used by the customer device:
- Menu and availability (sold-out polling)
- Checkout: order creation plus payment initiation
- Payment retry and completion, order status polling
"""

import logging
from datetime import UTC, datetime

from django.http import HttpRequest, JsonResponse
from django.views.decorators.cache import cache_control
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from dinein.web.core.decorators import idempotency_key_required
from dinein.web.core.http import (
    BadRequest,
    bad_request_response,
    exception_response,
    json_response,
    parse_body,
)
from dinein.web.payments.exceptions import GatewayUnavailable, PaymentError
from dinein.web.payments.gateways import GatewayTransaction
from dinein.web.payments.models import CallbackSource
from dinein.web.payments.services import initiate_payment, verify_and_settle
from dinein.web.restaurant.cart import Cart, CartLine
from dinein.web.restaurant.exceptions import OrderError
from dinein.web.restaurant.models import MenuItem, Order
from dinein.web.restaurant.serializers import (
    AvailabilityResponse,
    MenuCategorySchema,
    MenuItemSchema,
    MenuResponse,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderDetailResponse,
    OrderLineResponseSchema,
    OrderStatusResponse,
    PaymentErrorSchema,
    PaymentResultRequest,
    PaymentResultResponse,
    PaymentSchema,
)
from dinein.web.restaurant.services import checkout, get_order

logger = logging.getLogger(__name__)


def serialize_order(order: Order) -> OrderDetailResponse:
    """Serialize an Order with its lines."""
    return OrderDetailResponse(
        id=order.pk,
        table_number=order.table_number,
        customer_name=order.customer_name,
        status=order.status,
        payment_status=order.payment_status,
        total_amount=order.total_amount,
        lines=[
            OrderLineResponseSchema.model_validate(line) for line in order.lines.all()
        ],
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def serialize_status(order: Order) -> OrderStatusResponse:
    return OrderStatusResponse(
        id=order.pk,
        status=order.status,
        payment_status=order.payment_status,
        updated_at=order.updated_at,
    )


def _serialize_payment(order: Order, txn: GatewayTransaction) -> PaymentSchema:
    return PaymentSchema(
        gateway=order.payment_gateway,
        token=txn.token,
        reference=txn.reference,
        redirect_url=txn.redirect_url,
    )


# =============================================================================
# Menu
# =============================================================================


@require_GET
@cache_control(max_age=300, public=True)  # 5 minutes
def menu(_request: HttpRequest) -> JsonResponse:
    """
    GET /api/menu

    Full menu grouped by category. Sold-out items are included and flagged
    so the client can grey them out.
    """
    categories: dict[str, list[MenuItemSchema]] = {}
    for item in MenuItem.objects.all():
        categories.setdefault(item.category or "Other", []).append(
            MenuItemSchema.model_validate(item)
        )

    response = MenuResponse(
        categories=[
            MenuCategorySchema(name=name, items=items)
            for name, items in categories.items()
        ]
    )
    return json_response(response.model_dump(mode="json"))


@require_GET
@cache_control(max_age=30, public=True)  # 30 seconds
def availability(_request: HttpRequest) -> JsonResponse:
    """
    GET /api/availability

    Lightweight availability map for polling sold-out items.
    """
    items = {
        str(pk): is_available
        for pk, is_available in MenuItem.objects.values_list("pk", "is_available")
    }
    response = AvailabilityResponse(items=items, as_of=datetime.now(UTC))
    return json_response(response.model_dump(mode="json"))


# =============================================================================
# Order API Endpoints
# =============================================================================


@csrf_exempt
@require_POST
@idempotency_key_required
def create_order(request: HttpRequest) -> JsonResponse:
    """
    POST /api/orders

    Create an order from the cart and open a payment transaction for it.

    If the gateway is unavailable the order is still created (pending) and
    the response carries payment_error; the client retries through
    POST /api/orders/{order_id}/payment.

    Request body: OrderCreateRequest schema
    Response: OrderCreateResponse schema (201) or error envelope (400)
    """
    try:
        order_request = parse_body(request, OrderCreateRequest)
    except BadRequest as e:
        return bad_request_response(e)

    # Lines arrive already built by the client; keep each one as sent.
    cart = Cart(
        lines=[
            CartLine(line.menu_item_id, line.quantity, line.special_instructions)
            for line in order_request.lines
        ]
    )

    try:
        order = checkout(cart, order_request.table_number, order_request.customer_name)
    except OrderError as e:
        return exception_response(e)

    payment = None
    payment_error = None
    try:
        txn = initiate_payment(order)
        payment = _serialize_payment(order, txn)
    except GatewayUnavailable as e:
        logger.warning(
            "Order %s created but payment could not be started: %s",
            order.pk,
            e.message,
        )
        payment_error = PaymentErrorSchema(error=e.code, message=e.message)

    response = OrderCreateResponse(
        order=serialize_order(order),
        payment=payment,
        payment_error=payment_error,
    )
    return json_response(response.model_dump(mode="json"), status=201)


@require_GET
def order_detail(_request: HttpRequest, order_id: str) -> JsonResponse:
    """
    GET /api/orders/{order_id}

    Response: OrderDetailResponse schema (200) or 404
    """
    try:
        order = get_order(order_id)
    except OrderError as e:
        return exception_response(e)
    return json_response(serialize_order(order).model_dump(mode="json"))


@require_GET
@cache_control(max_age=5, public=True)  # 5 seconds
def order_status(_request: HttpRequest, order_id: str) -> JsonResponse:
    """
    GET /api/orders/{order_id}/status

    Current status for polling clients that cannot hold an event stream.
    """
    try:
        order = get_order(order_id)
    except OrderError as e:
        return exception_response(e)
    return json_response(serialize_status(order).model_dump(mode="json"))


@csrf_exempt
@require_POST
def order_payment(_request: HttpRequest, order_id: str) -> JsonResponse:
    """
    POST /api/orders/{order_id}/payment

    Open a new payment transaction for an unpaid pending order.

    Response: PaymentSchema (200), 409 if the order is not payable,
    503 if the gateway is unavailable
    """
    try:
        order = get_order(order_id)
        txn = initiate_payment(order)
    except (OrderError, PaymentError) as e:
        return exception_response(e)
    return json_response(_serialize_payment(order, txn).model_dump(mode="json"))


@csrf_exempt
@require_POST
def order_payment_result(request: HttpRequest, order_id: str) -> JsonResponse:
    """
    POST /api/orders/{order_id}/payment-result

    Called by the payment UI when it finishes. The reported result is not
    trusted: the gateway is asked for the actual outcome, which is applied.

    Request body: PaymentResultRequest schema
    Response: PaymentResultResponse schema (200) or error envelope
    """
    try:
        result_request = parse_body(request, PaymentResultRequest)
    except BadRequest as e:
        return bad_request_response(e)

    try:
        order = get_order(order_id)
        logger.info(
            "Payment UI reported %s for order %s", result_request.result, order.pk
        )
        outcome = verify_and_settle(order, source=CallbackSource.CLIENT)
    except (OrderError, PaymentError) as e:
        return exception_response(e)

    response = PaymentResultResponse(outcome=outcome, order=serialize_status(order))
    return json_response(response.model_dump(mode="json"))
