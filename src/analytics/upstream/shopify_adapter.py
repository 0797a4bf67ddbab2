"""Shopify Admin REST adapter for the order listing.

Pagination is cursor based: each response's ``Link`` header carries a
``rel="next"`` URL when more pages exist, and its query string (``limit``,
``page_info`` and ``fields``) is the whole parameter set of the next request.
Filters such as ``created_at_min`` are only accepted on the first request.
"""

import httpx
import structlog

from analytics.errors import UpstreamError
from analytics.upstream.port import OrderPage, OrderSource, QueryParams

logger = structlog.get_logger(__name__)


class ShopifyOrderSource(OrderSource):
    """Order source backed by ``GET /admin/api/{version}/orders.json``."""

    def __init__(
        self,
        shop_name: str,
        access_token: str,
        api_version: str = "2024-01",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.shop_name = shop_name
        self.api_version = api_version
        self._client = httpx.AsyncClient(
            base_url=f"https://{shop_name}.myshopify.com/admin/api/{api_version}",
            headers={"X-Shopify-Access-Token": access_token, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def fetch_page(self, params: QueryParams) -> OrderPage:
        query = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self._client.get("/orders.json", params=query)
        except httpx.HTTPError as exc:
            logger.error("shopify_request_failed", shop=self.shop_name, error=str(exc))
            raise UpstreamError(f"Order listing request failed: {exc}") from exc

        if response.is_error:
            logger.error(
                "shopify_error_response",
                shop=self.shop_name,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise UpstreamError(
                f"Order listing returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamError("Order listing returned a non-JSON body", status_code=response.status_code) from exc

        orders = body.get("orders") if isinstance(body, dict) else None
        if not isinstance(orders, list):
            raise UpstreamError("Order listing body has no 'orders' list", status_code=response.status_code)

        return OrderPage(orders=orders, next_params=self._next_params(response))

    @staticmethod
    def _next_params(response: httpx.Response) -> QueryParams | None:
        next_link = response.links.get("next")
        if not next_link or not next_link.get("url"):
            return None
        return dict(httpx.URL(next_link["url"]).params)

    async def aclose(self) -> None:
        await self._client.aclose()
