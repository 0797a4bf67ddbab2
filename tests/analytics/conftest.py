import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def analytics_bed():
    from analytics.domain import analytics

    bed = DomainFixture(analytics)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(analytics_bed):
    with analytics_bed.domain_context():
        yield


def _raw_order(
    order_id=1001,
    created_at="2024-01-01T10:00:00+00:00",
    financial_status="paid",
    fulfillments=None,
    refunds=None,
    line_items=None,
    total_price="19.99",
    **extra,
):
    order = {
        "id": order_id,
        "order_number": order_id,
        "created_at": created_at,
        "financial_status": financial_status,
        "fulfillment_status": "fulfilled" if fulfillments else None,
        "shipping_address": {"name": "Dana Whitfield"},
        "fulfillments": fulfillments or [],
        "refunds": refunds or [],
        "line_items": line_items
        if line_items is not None
        else [{"product_id": 7001, "title": "Ear Tips", "sku": "TIP-M", "quantity": 1, "price": "19.99"}],
        "total_price": total_price,
    }
    order.update(extra)
    return order


@pytest.fixture()
def raw_order():
    """Factory for upstream order documents with sensible defaults."""
    return _raw_order


@pytest.fixture()
def delivered_refunded_order():
    """Factory: fulfilled on ``delivered`` (status success) and refunded on ``refunded`` for ``amount``."""

    def _make(
        delivered="2024-01-01",
        refunded="2024-01-04",
        amount="19.99",
        financial_status="refunded",
        order_id=1001,
        created_at="2023-12-28T09:00:00+00:00",
    ):
        return _raw_order(
            order_id=order_id,
            created_at=created_at,
            financial_status=financial_status,
            fulfillments=[{"status": "success", "created_at": delivered}],
            refunds=[{"created_at": refunded, "transactions": [{"amount": amount}]}],
        )

    return _make
