"""FastAPI routes for the analytics API: orders, refund statistics and exports."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse, Response

from analytics.api.schemas import (
    AnalyticsSnapshotSchema,
    EnrichedOrderSchema,
    ErrorResponse,
    ProductSummarySchema,
)
from analytics.errors import UpstreamError
from analytics.order.order import EnrichedOrder
from analytics.reporting.aggregation import aggregate
from analytics.reporting.export import export_filename, refunds_csv
from analytics.reporting.loading import load_enriched_orders
from analytics.reporting.products import unique_products
from analytics.utils.logging import bind_request_context
from analytics.window import DateWindow

logger = structlog.get_logger(__name__)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid date range"},
    500: {"model": ErrorResponse, "description": "Upstream or processing failure"},
}

analytics_router = APIRouter(prefix="/api", tags=["analytics"], responses=_ERROR_RESPONSES)


class _RequestFailed(Exception):
    def __init__(self, response: JSONResponse) -> None:
        self.response = response


def _window(start_date: datetime, end_date: datetime) -> DateWindow:
    try:
        window = DateWindow.from_bounds(start_date, end_date)
    except ValueError as exc:
        raise _RequestFailed(JSONResponse(status_code=400, content={"error": str(exc)})) from exc
    bind_request_context(window=str(window))
    return window


async def _load(window: DateWindow) -> list[EnrichedOrder]:
    try:
        return await load_enriched_orders(window)
    except UpstreamError as exc:
        logger.error("order_collection_failed", window=str(window), error=str(exc))
        raise _RequestFailed(JSONResponse(status_code=500, content={"error": str(exc)})) from exc
    except Exception as exc:
        logger.exception("order_processing_failed", window=str(window))
        raise _RequestFailed(JSONResponse(status_code=500, content={"error": str(exc)})) from exc


StartDate = Query(alias="startDate", description="ISO 8601 start of the window (inclusive day)")
EndDate = Query(alias="endDate", description="ISO 8601 end of the window (inclusive day)")


@analytics_router.get("/orders", response_model=list[EnrichedOrderSchema])
async def list_orders(start_date: datetime = StartDate, end_date: datetime = EndDate):
    """Enriched orders created from one year before ``startDate`` through ``endDate``."""
    try:
        orders = await _load(_window(start_date, end_date))
    except _RequestFailed as failure:
        return failure.response
    return [EnrichedOrderSchema.from_domain(order) for order in orders]


@analytics_router.get("/analytics", response_model=AnalyticsSnapshotSchema)
async def refund_analytics(start_date: datetime = StartDate, end_date: datetime = EndDate):
    """Refund statistics for exactly ``startDate..endDate``."""
    try:
        window = _window(start_date, end_date)
        orders = await _load(window)
    except _RequestFailed as failure:
        return failure.response
    return AnalyticsSnapshotSchema.from_domain(aggregate(orders, window.start, window.end))


@analytics_router.get("/products", response_model=list[ProductSummarySchema])
async def list_products(start_date: datetime = StartDate, end_date: datetime = EndDate):
    """Products across the loaded orders, one per SKU."""
    try:
        orders = await _load(_window(start_date, end_date))
    except _RequestFailed as failure:
        return failure.response
    return [ProductSummarySchema(**product) for product in unique_products(orders)]


@analytics_router.get("/refunds/export", response_class=Response)
async def export_refunds(start_date: datetime = StartDate, end_date: datetime = EndDate):
    """CSV of every refund dated inside the window."""
    try:
        window = _window(start_date, end_date)
        orders = await _load(window)
    except _RequestFailed as failure:
        return failure.response
    return Response(
        content=refunds_csv(orders, window),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(window)}"'},
    )
