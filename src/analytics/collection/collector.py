"""Order collector: walks the order listing to completion.

Pages are requested one at a time. After each page that announces a
continuation, the collector waits a fixed delay before asking for the next
one to stay under the upstream rate limit. The upstream decides the
continuation parameters; the collector only replays them. There is no page
or time cap, and any failed page fails the whole collection.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC

import structlog

from analytics.collection.cache import ResultCache, cache_key
from analytics.upstream.port import OrderSource, QueryParams, RawOrder
from analytics.window import DateWindow

logger = structlog.get_logger(__name__)

# Largest page the order listing accepts
PAGE_SIZE = 250

DEFAULT_PAGE_DELAY = 0.5

# Only what the enricher reads
ORDER_FIELDS = ",".join(
    [
        "id",
        "order_number",
        "created_at",
        "fulfillments",
        "refunds",
        "financial_status",
        "shipping_address",
        "fulfillment_status",
        "total_price",
        "line_items.product_id",
        "line_items.title",
        "line_items.sku",
        "line_items.quantity",
        "line_items.price",
    ]
)


def build_query(window: DateWindow) -> QueryParams:
    """Initial parameter set for the listing of orders created inside ``window``."""
    return {
        "status": "any",
        "created_at_min": window.start.astimezone(UTC).isoformat(),
        "created_at_max": window.end.astimezone(UTC).isoformat(),
        "limit": PAGE_SIZE,
        "fields": ORDER_FIELDS,
    }


class OrderCollector:
    def __init__(
        self,
        source: OrderSource,
        cache: ResultCache,
        page_delay: float = DEFAULT_PAGE_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.source = source
        self.cache = cache
        self.page_delay = page_delay
        self._sleep = sleep

    async def collect(self, window: DateWindow) -> list[RawOrder]:
        """All raw orders created in ``window``, served from cache when fresh."""
        params = build_query(window)
        return await self.cache.get_or_compute(cache_key(params), lambda: self.fetch_all(params))

    async def fetch_all(self, params: QueryParams) -> list[RawOrder]:
        """Uncached walk of every page starting from ``params``. Raises UpstreamError."""
        orders: list[RawOrder] = []
        params = dict(params)
        page_number = 1

        while True:
            logger.info("fetching_order_page", page=page_number, collected=len(orders))
            page = await self.source.fetch_page(params)
            orders.extend(page.orders)

            if page.is_last:
                break

            params = dict(page.next_params)
            page_number += 1
            await self._sleep(self.page_delay)

        logger.info("order_collection_complete", pages=page_number, total=len(orders))
        return orders
