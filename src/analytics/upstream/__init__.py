"""Order source factory.

Provides get_source() / set_source() to swap implementations:
- FakeOrderSource for development and testing (default)
- ShopifyOrderSource when ORDER_SOURCE=shopify
"""

import structlog

from analytics.config import Settings
from analytics.errors import ConfigurationError
from analytics.upstream.port import OrderPage, OrderSource

logger = structlog.get_logger(__name__)

# Environments where an empty in-memory listing is expected
FAKE_SOURCE_ENVIRONMENTS = ("test", "development")

_current_source: OrderSource | None = None


def build_source(settings: Settings) -> OrderSource:
    """Instantiate the adapter named by ``settings.order_source``."""
    if settings.order_source == "fake":
        from analytics.upstream.fake_adapter import FakeOrderSource

        if settings.environment not in FAKE_SOURCE_ENVIRONMENTS:
            logger.warning("fake_order_source_selected", environment=settings.environment)
        return FakeOrderSource()
    if settings.order_source == "shopify":
        from analytics.upstream.shopify_adapter import ShopifyOrderSource

        settings.require_shopify_credentials()
        return ShopifyOrderSource(
            shop_name=settings.shop_name,
            access_token=settings.access_token,
            api_version=settings.api_version,
            timeout=settings.upstream_timeout_seconds,
        )
    raise ConfigurationError(f"Unknown order source: {settings.order_source}")


def get_source() -> OrderSource:
    """Return the current order source, building it from the environment on first use."""
    global _current_source
    if _current_source is None:
        _current_source = build_source(Settings.from_env())
    return _current_source


def set_source(source: OrderSource) -> None:
    """Override the active order source (useful for tests)."""
    global _current_source
    _current_source = source


def reset_source() -> None:
    global _current_source
    _current_source = None


__all__ = ["OrderPage", "OrderSource", "build_source", "get_source", "set_source", "reset_source"]
