"""Order enrichment: derive delivery and refund timing from a raw order.

``enrich`` never fails on a well-formed order document. Missing or odd
fields fall back to defaults instead: ``"N/A"`` for an unknown shipping name,
``None`` for unknown dates, ``0`` for amounts that do not parse. One bad
order therefore never aborts a batch.

Delivery date, from the selected fulfillment:

- ``shipment_status == "delivered"`` → the fulfillment's ``updated_at``
- else ``status == "success"`` → the fulfillment's ``created_at``
- else unknown

Refund lag is the delivery-to-refund gap rounded to whole days. Only a gap
of at least one day is measured; a same-day or earlier refund is
``before_delivery``.
"""

import math
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

import structlog

from analytics.order.order import EnrichedOrder, Product, RefundLag, RefundStatus
from analytics.upstream.port import RawOrder
from analytics.window import ONE_DAY, parse_timestamp

logger = structlog.get_logger(__name__)

# Orders are assumed to ship in one fulfillment. Later fulfillments are
# ignored; switch off to use the most recently created one instead.
USE_FIRST_FULFILLMENT_ONLY = True

# The first refund dates the order's refund even when there are several.
# Switch off to date it by the most recent refund instead.
USE_FIRST_REFUND_DATE_ONLY = True

UNKNOWN_SHIPPING_NAME = "N/A"
UNKNOWN_SKU = "N/A"

_EPOCH = datetime.min.replace(tzinfo=UTC)


def parse_amount(value: Any) -> float:
    """Monetary string or number as float; anything unparsable is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _list_of_dicts(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def select_fulfillment(fulfillments: list[dict]) -> dict | None:
    if not fulfillments:
        return None
    if USE_FIRST_FULFILLMENT_ONLY:
        return fulfillments[0]
    return max(fulfillments, key=lambda f: parse_timestamp(f.get("created_at")) or _EPOCH)


def select_refund_date(refunds: list[dict]) -> datetime | None:
    if not refunds:
        return None
    if USE_FIRST_REFUND_DATE_ONLY:
        return parse_timestamp(refunds[0].get("created_at"))
    dates = [d for d in (parse_timestamp(r.get("created_at")) for r in refunds) if d is not None]
    return max(dates, default=None)


def total_refunded(refunds: Iterable[dict]) -> float:
    """Sum of every transaction amount across every refund."""
    return sum(
        parse_amount(transaction.get("amount"))
        for refund in refunds
        for transaction in _list_of_dicts(refund.get("transactions"))
    )


def delivery_date_of(fulfillment: dict | None) -> datetime | None:
    if fulfillment is None:
        return None
    if fulfillment.get("shipment_status") == "delivered":
        return parse_timestamp(fulfillment.get("updated_at"))
    if fulfillment.get("status") == "success":
        return parse_timestamp(fulfillment.get("created_at"))
    return None


def refund_lag(delivery_date: datetime | None, refund_date: datetime | None) -> RefundLag:
    if delivery_date is None or refund_date is None:
        return RefundLag.unknown()

    # Half-days round up, matching the dashboard's historical numbers
    days = math.floor((refund_date - delivery_date) / ONE_DAY + 0.5)
    if days > 0:
        return RefundLag.measured(days)
    return RefundLag.before_delivery()


def to_product(line_item: dict) -> Product:
    return Product(
        product_id=_as_int(line_item.get("product_id")),
        title=_as_text(line_item.get("title")),
        sku=_as_text(line_item.get("sku")) or UNKNOWN_SKU,
        quantity=_as_int(line_item.get("quantity")) or 0,
        price=parse_amount(line_item.get("price")),
    )


def enrich(order: RawOrder) -> EnrichedOrder:
    fulfillment = select_fulfillment(_list_of_dicts(order.get("fulfillments")))
    refunds = _list_of_dicts(order.get("refunds"))

    delivery_date = delivery_date_of(fulfillment)
    refund_date = select_refund_date(refunds)

    shipping_address = order.get("shipping_address")
    shipping_name = (
        _as_text(shipping_address.get("name")) if isinstance(shipping_address, dict) else None
    ) or UNKNOWN_SHIPPING_NAME

    transit_status = None
    if fulfillment is not None:
        transit_status = _as_text(fulfillment.get("shipment_status") or fulfillment.get("status")) or "unknown"

    return EnrichedOrder(
        order_id=_as_int(order.get("id")),
        order_number=_as_int(order.get("order_number")),
        order_date=parse_timestamp(order.get("created_at")),
        shipping_name=shipping_name,
        fulfillment_status=_as_text(order.get("fulfillment_status")) or "unfulfilled",
        fulfillment_date=parse_timestamp(fulfillment.get("created_at")) if fulfillment else None,
        tracking_number=_as_text(fulfillment.get("tracking_number")) if fulfillment else None,
        tracking_url=_as_text(fulfillment.get("tracking_url")) if fulfillment else None,
        financial_status=_as_text(order.get("financial_status")),
        refund_status=RefundStatus.from_financial_status(order.get("financial_status")).value,
        delivery_date=delivery_date,
        transit_status=transit_status,
        refund_date=refund_date,
        days_to_refund=refund_lag(delivery_date, refund_date),
        has_refunds=bool(refunds),
        total_price=parse_amount(order.get("total_price")),
        refund_amount=total_refunded(refunds),
        products=[to_product(item) for item in _list_of_dicts(order.get("line_items"))],
    )


def enrich_all(orders: Iterable[RawOrder]) -> list[EnrichedOrder]:
    enriched = [enrich(order) for order in orders]
    logger.info(
        "orders_enriched",
        total=len(enriched),
        refunded=sum(1 for o in enriched if o.refund_status != RefundStatus.NOT_REFUNDED.value),
    )
    return enriched
