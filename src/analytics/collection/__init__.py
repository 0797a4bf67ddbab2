"""Order collector factory.

The cache is built once here (or by the app lifespan) and handed to the
collector; get_collector() / set_collector() let tests swap either.
"""

from datetime import timedelta

from analytics.collection.cache import ResultCache
from analytics.collection.collector import OrderCollector
from analytics.config import Settings
from analytics.upstream import get_source

_current_collector: OrderCollector | None = None


def build_collector(settings: Settings) -> OrderCollector:
    cache = ResultCache(ttl=timedelta(seconds=settings.cache_ttl_seconds))
    return OrderCollector(source=get_source(), cache=cache, page_delay=settings.page_delay_seconds)


def get_collector() -> OrderCollector:
    """Return the process collector, building it from the environment on first use."""
    global _current_collector
    if _current_collector is None:
        _current_collector = build_collector(Settings.from_env())
    return _current_collector


def set_collector(collector: OrderCollector) -> None:
    global _current_collector
    _current_collector = collector


def reset_collector() -> None:
    global _current_collector
    _current_collector = None


__all__ = ["OrderCollector", "ResultCache", "build_collector", "get_collector", "set_collector", "reset_collector"]
