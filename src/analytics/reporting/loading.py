"""Load enriched orders for a reporting window.

The upstream listing can only filter by order creation date, but a refund in
the window may belong to an order placed well before it. The fetch therefore
reaches back ``FETCH_LOOKBACK_YEARS`` before the window start; reports still
filter on the exact window.
"""

from analytics.collection import OrderCollector, get_collector
from analytics.order.enrichment import enrich_all
from analytics.order.order import EnrichedOrder
from analytics.window import DateWindow

FETCH_LOOKBACK_YEARS = 1


def fetch_window(window: DateWindow) -> DateWindow:
    return window.widened(years=FETCH_LOOKBACK_YEARS)


async def load_enriched_orders(window: DateWindow, collector: OrderCollector | None = None) -> list[EnrichedOrder]:
    """Raises UpstreamError when the listing cannot be collected."""
    collector = collector or get_collector()
    raw_orders = await collector.collect(fetch_window(window))
    return enrich_all(raw_orders)
