"""Staff dashboard view."""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET

from dinein.web.core.decorators import staff_required
from dinein.web.core.http import json_response
from dinein.web.dashboard.serializers import DashboardResponse, LowStockItemSchema
from dinein.web.dashboard.services import get_stats, low_stock_items, recent_orders
from dinein.web.restaurant.views import serialize_order


@require_GET
@staff_required
def dashboard(_request: HttpRequest) -> JsonResponse:
    """
    GET /api/staff/dashboard

    Order counts, paid revenue, low-stock items and the latest orders.
    Figures are recomputed from the database on every request.
    """
    stats = get_stats()
    response = DashboardResponse(
        total_orders=stats.total_orders,
        active_orders=stats.active_orders,
        completed_orders=stats.completed_orders,
        cancelled_orders=stats.cancelled_orders,
        total_revenue=stats.total_revenue,
        low_stock_items=stats.low_stock_items,
        low_stock=[
            LowStockItemSchema.model_validate(item) for item in low_stock_items()
        ],
        recent_orders=[serialize_order(order) for order in recent_orders()],
    )
    return json_response(response.model_dump(mode="json"))
