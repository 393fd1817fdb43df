"""
Pydantic schemas for menu, order and staff API requests and responses.

These schemas define the public API contract for order data.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Menu
# =============================================================================


class MenuItemSchema(BaseModel):
    """A menu item as shown to customers."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: Decimal
    category: str
    image_url: str
    is_available: bool


class MenuCategorySchema(BaseModel):
    """Items grouped under one category name."""

    name: str
    items: list[MenuItemSchema] = Field(default_factory=list)


class MenuResponse(BaseModel):
    """Response for GET /api/menu."""

    categories: list[MenuCategorySchema]


class AvailabilityResponse(BaseModel):
    """Response for GET /api/availability."""

    items: dict[str, bool]  # item_id -> is_available
    as_of: datetime


# =============================================================================
# Orders (customer)
# =============================================================================


class OrderLineCreateSchema(BaseModel):
    """A single cart line in a checkout request."""

    menu_item_id: int
    quantity: int = Field(..., ge=1, le=99)
    special_instructions: str = Field(default="", max_length=500)


class OrderCreateRequest(BaseModel):
    """Request body for POST /api/orders."""

    table_number: int = Field(..., gt=0)
    customer_name: str = Field(..., min_length=1, max_length=200)
    lines: list[OrderLineCreateSchema] = Field(default_factory=list)


class OrderLineResponseSchema(BaseModel):
    """A line in an order response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    menu_item_id: int | None
    item_name: str
    unit_price: Decimal
    quantity: int
    special_instructions: str
    line_total: Decimal


class PaymentSchema(BaseModel):
    """What the customer device needs to open the payment UI."""

    gateway: str
    token: str
    reference: str
    redirect_url: str | None = None


class PaymentErrorSchema(BaseModel):
    """Why a payment could not be started (the order still exists)."""

    error: str
    message: str


class OrderDetailResponse(BaseModel):
    """Response for GET /api/orders/{order_id}."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    table_number: int
    customer_name: str
    status: str
    payment_status: str
    total_amount: Decimal
    lines: list[OrderLineResponseSchema]
    created_at: datetime
    updated_at: datetime


class OrderCreateResponse(BaseModel):
    """Response for POST /api/orders."""

    order: OrderDetailResponse
    payment: PaymentSchema | None = None
    payment_error: PaymentErrorSchema | None = None


class OrderStatusResponse(BaseModel):
    """Response for GET /api/orders/{order_id}/status."""

    id: UUID
    status: str
    payment_status: str
    updated_at: datetime


class PaymentResultRequest(BaseModel):
    """
    Request body for POST /api/orders/{order_id}/payment-result.

    The reported result is only a hint; the gateway is asked for the truth.
    """

    result: Literal["success", "pending", "error", "closed"] = "success"


class PaymentResultResponse(BaseModel):
    """Response for POST /api/orders/{order_id}/payment-result."""

    outcome: str
    order: OrderStatusResponse


# =============================================================================
# Staff
# =============================================================================


class OrderListResponse(BaseModel):
    """Response for GET /api/staff/orders."""

    orders: list[OrderDetailResponse]
    count: int


class TransitionRequest(BaseModel):
    """Request body for POST /api/staff/orders/{order_id}/transition."""

    status: str = Field(..., min_length=1)


# =============================================================================
# Errors
# =============================================================================


class ValidationErrorDetail(BaseModel):
    """A single validation error."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope shared by every JSON endpoint."""

    error: str
    message: str
    details: list[dict[str, Any]] = Field(default_factory=list)


class ValidationErrorResponse(BaseModel):
    """Response for validation errors."""

    error: Literal["validation_error", "empty_cart"]
    message: str = "Invalid request"
    details: list[ValidationErrorDetail]
