"""Refund analytics for a date window.

Orders count toward the window by order date; refunds count by refund date,
so an order placed last year and refunded this week contributes a refund but
not an order. Only full refunds (``Refunded``) are refund candidates.

The snapshot is recomputed from scratch every time. There is no incremental
state.
"""

from collections.abc import Iterable
from datetime import date, datetime

from protean.fields import Float, Integer

from analytics.domain import analytics
from analytics.order.order import EnrichedOrder, RefundLagKind
from analytics.window import DateWindow


@analytics.value_object
class AnalyticsSnapshot:
    total_orders = Integer(default=0, min_value=0)
    total_refunds = Integer(default=0, min_value=0)
    avg_days_to_refund = Float(default=0.0)
    total_refund_amount = Float(default=0.0)
    refund_rate = Float(default=0.0)
    avg_refund_amount = Float(default=0.0)


def refund_candidates(orders: Iterable[EnrichedOrder], window: DateWindow) -> list[EnrichedOrder]:
    """Fully refunded orders whose refund date falls inside ``window``."""
    return [order for order in orders if order.is_fully_refunded and window.contains(order.refund_date)]


def _measured_days(orders: Iterable[EnrichedOrder]) -> list[int]:
    days = []
    for order in orders:
        lag = order.days_to_refund
        match RefundLagKind(lag.kind):
            case RefundLagKind.MEASURED:
                days.append(lag.days)
            case RefundLagKind.BEFORE_DELIVERY | RefundLagKind.UNKNOWN:
                continue
    return days


def aggregate(
    orders: Iterable[EnrichedOrder],
    window_start: date | datetime,
    window_end: date | datetime,
) -> AnalyticsSnapshot:
    """Summary statistics for the inclusive day window ``window_start..window_end``."""
    window = DateWindow.from_bounds(window_start, window_end)
    orders = list(orders)

    total_orders = sum(1 for order in orders if window.contains(order.order_date))
    candidates = refund_candidates(orders, window)
    total_refunds = len(candidates)

    measured = _measured_days(candidates)
    avg_days_to_refund = round(sum(measured) / len(measured), 1) if measured else 0.0

    total_refund_amount = sum(order.refund_amount or 0.0 for order in candidates)

    return AnalyticsSnapshot(
        total_orders=total_orders,
        total_refunds=total_refunds,
        avg_days_to_refund=avg_days_to_refund,
        total_refund_amount=total_refund_amount,
        refund_rate=(total_refunds / total_orders) * 100 if total_orders > 0 else 0.0,
        avg_refund_amount=total_refund_amount / total_refunds if total_refunds > 0 else 0.0,
    )
