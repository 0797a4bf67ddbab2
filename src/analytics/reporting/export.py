"""CSV export of the refunds inside a window."""

import csv
import io
from collections.abc import Iterable
from datetime import datetime

from analytics.order.order import EnrichedOrder
from analytics.window import DateWindow

CSV_HEADERS = [
    "Order Number",
    "Order Date",
    "Refund Date",
    "Days to Refund",
    "Order Amount",
    "Refund Amount",
]


def _day(moment: datetime | None) -> str:
    return moment.date().isoformat() if moment else ""


def refund_rows(orders: Iterable[EnrichedOrder], window: DateWindow) -> list[list[str]]:
    """Every order with a refund dated inside ``window``, partial refunds included."""
    rows = []
    for order in orders:
        if not window.contains(order.refund_date):
            continue
        days = order.days_to_refund.to_wire()
        rows.append(
            [
                "" if order.order_number is None else str(order.order_number),
                _day(order.order_date),
                _day(order.refund_date),
                "" if days is None else str(days),
                f"{order.total_price or 0.0:.2f}",
                f"{order.refund_amount or 0.0:.2f}",
            ]
        )
    return rows


def refunds_csv(orders: Iterable[EnrichedOrder], window: DateWindow) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(refund_rows(orders, window))
    return buffer.getvalue()


def export_filename(window: DateWindow) -> str:
    return f"refunds-{window.start.date().isoformat()}-to-{window.end.date().isoformat()}.csv"
