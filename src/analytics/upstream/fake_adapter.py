"""In-memory order source for development and testing.

Serves a fixed list of raw orders in pages of ``page_size``. Continuation is
an opaque ``page_info`` token, the same shape Shopify hands back, so the
collector cannot tell the difference. It can be configured to fail, and it
records every request it receives.
"""

from analytics.errors import UpstreamError
from analytics.upstream.port import OrderPage, OrderSource, QueryParams, RawOrder
from analytics.window import parse_timestamp


class FakeOrderSource(OrderSource):
    """Configurable fake order-listing API."""

    def __init__(self, orders: list[RawOrder] | None = None, page_size: int = 250) -> None:
        self.orders: list[RawOrder] = list(orders or [])
        self.page_size = page_size
        self.should_succeed: bool = True
        self.failure_reason: str = "Upstream unavailable"
        self.fail_on_call: int | None = None
        self.calls: list[QueryParams] = []
        self._cursors: dict[str, list[RawOrder]] = {}

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Upstream unavailable",
        fail_on_call: int | None = None,
    ) -> None:
        """Fail every request, or only the ``fail_on_call``-th one (1-based)."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.fail_on_call = fail_on_call

    def load(self, orders: list[RawOrder]) -> None:
        self.orders = list(orders)
        self._cursors.clear()

    async def fetch_page(self, params: QueryParams) -> OrderPage:
        self.calls.append(dict(params))

        if not self.should_succeed or self.fail_on_call == len(self.calls):
            raise UpstreamError(self.failure_reason, status_code=503)

        page_info = params.get("page_info")
        if page_info is None:
            remaining = self._select(params)
        else:
            try:
                remaining = self._cursors.pop(page_info)
            except KeyError as exc:
                raise UpstreamError(f"Invalid page_info: {page_info}", status_code=400) from exc

        limit = min(int(params.get("limit", self.page_size)), self.page_size)
        page, rest = remaining[:limit], remaining[limit:]
        if not rest:
            return OrderPage(orders=page)

        token = f"cursor-{len(self.calls)}"
        self._cursors[token] = rest
        return OrderPage(
            orders=page,
            next_params={"limit": params.get("limit", self.page_size), "page_info": token, "fields": params.get("fields")},
        )

    def _select(self, params: QueryParams) -> list[RawOrder]:
        lower = parse_timestamp(params.get("created_at_min"))
        upper = parse_timestamp(params.get("created_at_max"))
        selected = []
        for order in self.orders:
            created_at = parse_timestamp(order.get("created_at"))
            if created_at is not None:
                if lower is not None and created_at < lower:
                    continue
                if upper is not None and created_at > upper:
                    continue
            selected.append(order)
        return selected
