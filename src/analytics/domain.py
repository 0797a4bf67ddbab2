"""Refund Analytics bounded context: order enrichment and refund reporting.

Pulls orders from the storefront's order-listing API, derives delivery and
refund timing facts per order, and computes refund statistics for a date
window. Derived records are immutable value objects; nothing is persisted.
"""

from protean.domain import Domain

from analytics.utils.logging import configure_logging

configure_logging()

analytics = Domain(name="analytics")
