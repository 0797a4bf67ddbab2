"""Product list across a set of orders, one entry per SKU."""

from collections.abc import Iterable

from analytics.order.order import EnrichedOrder


def unique_products(orders: Iterable[EnrichedOrder]) -> list[dict]:
    """``[{"sku", "title"}]`` in first-seen SKU order; a later title for the same SKU wins."""
    by_sku: dict[str, dict] = {}
    for order in orders:
        for product in order.products or []:
            by_sku[product.sku] = {"sku": product.sku, "title": product.title}
    return list(by_sku.values())
