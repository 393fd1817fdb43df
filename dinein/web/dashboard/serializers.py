"""Pydantic schemas for the staff dashboard."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from dinein.web.restaurant.serializers import OrderDetailResponse


class LowStockItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    stock_quantity: int


class DashboardResponse(BaseModel):
    """Response for GET /api/staff/dashboard."""

    total_orders: int
    active_orders: int
    completed_orders: int
    cancelled_orders: int
    total_revenue: Decimal
    low_stock_items: int
    low_stock: list[LowStockItemSchema]
    recent_orders: list[OrderDetailResponse]
