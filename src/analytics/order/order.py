"""Enriched order: the derived, read-only view of one storefront order.

An EnrichedOrder is computed from a raw order document and never changes
afterwards. Timing facts (delivery date, refund date, refund lag) follow the
policies in ``analytics.order.enrichment``.
"""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, List, String, Text, ValueObject

from analytics.domain import analytics


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class RefundStatus(Enum):
    REFUNDED = "Refunded"
    PARTIALLY_REFUNDED = "PartiallyRefunded"
    NOT_REFUNDED = "NotRefunded"

    @classmethod
    def from_financial_status(cls, financial_status: str | None) -> "RefundStatus":
        if financial_status == "refunded":
            return cls.REFUNDED
        if financial_status == "partially_refunded":
            return cls.PARTIALLY_REFUNDED
        return cls.NOT_REFUNDED


class RefundLagKind(Enum):
    MEASURED = "measured"
    BEFORE_DELIVERY = "before_delivery"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@analytics.value_object
class RefundLag:
    """Whole days between delivery and refund.

    Three cases, and consumers are expected to handle all of them:

    - ``measured``: refunded ``days`` (>= 1) after delivery
    - ``before_delivery``: refunded before, or on the same day as, delivery
    - ``unknown``: delivery or refund date missing
    """

    kind = String(required=True, max_length=20, choices=RefundLagKind)
    days = Integer(min_value=1)

    @invariant.post
    def days_only_when_measured(self):
        if self.kind == RefundLagKind.MEASURED.value and self.days is None:
            raise ValidationError({"days": ["A measured refund lag needs a day count"]})
        if self.kind != RefundLagKind.MEASURED.value and self.days is not None:
            raise ValidationError({"days": [f"A {self.kind} refund lag has no day count"]})

    @classmethod
    def measured(cls, days: int) -> "RefundLag":
        return cls(kind=RefundLagKind.MEASURED.value, days=days)

    @classmethod
    def before_delivery(cls) -> "RefundLag":
        return cls(kind=RefundLagKind.BEFORE_DELIVERY.value)

    @classmethod
    def unknown(cls) -> "RefundLag":
        return cls(kind=RefundLagKind.UNKNOWN.value)

    @property
    def is_measured(self) -> bool:
        return self.kind == RefundLagKind.MEASURED.value

    def to_wire(self) -> int | str | None:
        """JSON form: the day count, the string ``"before_delivery"``, or null."""
        match RefundLagKind(self.kind):
            case RefundLagKind.MEASURED:
                return self.days
            case RefundLagKind.BEFORE_DELIVERY:
                return RefundLagKind.BEFORE_DELIVERY.value
            case RefundLagKind.UNKNOWN:
                return None


@analytics.value_object
class Product:
    """A line item as surfaced in reports."""

    product_id = Integer()
    title = Text()
    sku = Text(default="N/A")
    quantity = Integer(default=0)
    price = Float(default=0.0)


@analytics.value_object
class EnrichedOrder:
    order_id = Integer()
    order_number = Integer()
    order_date = DateTime()
    shipping_name = Text(default="N/A")
    fulfillment_status = Text(default="unfulfilled")
    fulfillment_date = DateTime()
    tracking_number = Text()
    tracking_url = Text()
    financial_status = Text()
    refund_status = String(
        max_length=20,
        choices=RefundStatus,
        default=RefundStatus.NOT_REFUNDED.value,
    )
    delivery_date = DateTime()
    transit_status = Text()
    refund_date = DateTime()
    days_to_refund = ValueObject(RefundLag, required=True)
    has_refunds = Boolean(default=False)
    total_price = Float(default=0.0)
    refund_amount = Float(default=0.0)
    products = List(content_type=ValueObject(Product))

    @property
    def is_fully_refunded(self) -> bool:
        return self.refund_status == RefundStatus.REFUNDED.value
