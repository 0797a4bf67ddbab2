"""Pydantic response schemas for the analytics API.

These are the external contract the dashboard consumes: camelCase keys,
absent values as ``null`` (never omitted), refund lag as a number, the string
``"before_delivery"`` or ``null``.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from analytics.order.order import EnrichedOrder, Product
from analytics.reporting.aggregation import AnalyticsSnapshot


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class ProductSchema(_CamelModel):
    id: int | None = None
    title: str | None = None
    sku: str = "N/A"
    quantity: int = 0
    price: float = 0.0

    @classmethod
    def from_domain(cls, product: Product) -> "ProductSchema":
        return cls(
            id=product.product_id,
            title=product.title,
            sku=product.sku,
            quantity=product.quantity,
            price=product.price,
        )


class EnrichedOrderSchema(_CamelModel):
    id: int | None = None
    order_number: int | None = None
    order_date: datetime | None = None
    shipping_name: str
    fulfillment_status: str
    fulfillment_date: datetime | None = None
    tracking_number: str | None = None
    tracking_url: str | None = None
    financial_status: str | None = None
    refund_status: Literal["Refunded", "PartiallyRefunded", "NotRefunded"]
    delivery_date: datetime | None = None
    transit_status: str | None = None
    refund_date: datetime | None = None
    days_to_refund: int | Literal["before_delivery"] | None = None
    has_refunds: bool = False
    total_price: float = 0.0
    refund_amount: float = 0.0
    products: list[ProductSchema] = Field(default_factory=list)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "id": 5012345678,
                    "orderNumber": 1042,
                    "orderDate": "2023-12-28T09:12:00Z",
                    "shippingName": "Dana Whitfield",
                    "fulfillmentStatus": "fulfilled",
                    "fulfillmentDate": "2024-01-01T00:00:00Z",
                    "trackingNumber": "1Z999AA10123456784",
                    "trackingUrl": "https://www.ups.com/track?tracknum=1Z999AA10123456784",
                    "financialStatus": "refunded",
                    "refundStatus": "Refunded",
                    "deliveryDate": "2024-01-01T00:00:00Z",
                    "transitStatus": "success",
                    "refundDate": "2024-01-04T00:00:00Z",
                    "daysToRefund": 3,
                    "hasRefunds": True,
                    "totalPrice": 19.99,
                    "refundAmount": 19.99,
                    "products": [
                        {"id": 7001, "title": "Ear Tips", "sku": "TIP-M", "quantity": 1, "price": 19.99}
                    ],
                }
            ]
        },
    )

    @classmethod
    def from_domain(cls, order: EnrichedOrder) -> "EnrichedOrderSchema":
        return cls(
            id=order.order_id,
            order_number=order.order_number,
            order_date=order.order_date,
            shipping_name=order.shipping_name,
            fulfillment_status=order.fulfillment_status,
            fulfillment_date=order.fulfillment_date,
            tracking_number=order.tracking_number,
            tracking_url=order.tracking_url,
            financial_status=order.financial_status,
            refund_status=order.refund_status,
            delivery_date=order.delivery_date,
            transit_status=order.transit_status,
            refund_date=order.refund_date,
            days_to_refund=order.days_to_refund.to_wire(),
            has_refunds=order.has_refunds,
            total_price=order.total_price,
            refund_amount=order.refund_amount,
            products=[ProductSchema.from_domain(p) for p in order.products or []],
        )


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------
class AnalyticsSnapshotSchema(_CamelModel):
    total_orders: int
    total_refunds: int
    avg_days_to_refund: float
    total_refund_amount: float
    refund_rate: float
    avg_refund_amount: float

    @classmethod
    def from_domain(cls, snapshot: AnalyticsSnapshot) -> "AnalyticsSnapshotSchema":
        return cls(
            total_orders=snapshot.total_orders,
            total_refunds=snapshot.total_refunds,
            avg_days_to_refund=snapshot.avg_days_to_refund,
            total_refund_amount=snapshot.total_refund_amount,
            refund_rate=snapshot.refund_rate,
            avg_refund_amount=snapshot.avg_refund_amount,
        )


class ProductSummarySchema(BaseModel):
    sku: str
    title: str | None = None


class ErrorResponse(BaseModel):
    error: str
