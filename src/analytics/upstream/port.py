"""Order source port (abstract interface).

Defines the contract every order-listing adapter implements, so the
collector can page through Shopify in production and through canned data in
development and tests without changing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

RawOrder = dict[str, Any]
QueryParams = dict[str, Any]


@dataclass(frozen=True)
class OrderPage:
    """One page of the order listing.

    ``next_params`` is the complete parameter set for the following request,
    as decided by the upstream. ``None`` marks the last page.
    """

    orders: list[RawOrder] = field(default_factory=list)
    next_params: QueryParams | None = None

    @property
    def is_last(self) -> bool:
        return self.next_params is None


class OrderSource(ABC):
    """Abstract order-listing API."""

    @abstractmethod
    async def fetch_page(self, params: QueryParams) -> OrderPage:
        """Request one page. Raises UpstreamError on any failure."""
        ...

    async def aclose(self) -> None:
        """Release transport resources. Adapters without any may ignore this."""
        return None
