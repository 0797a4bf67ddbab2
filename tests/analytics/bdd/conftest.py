"""Shared BDD fixtures and step definitions for refund analytics."""

from pytest_bdd import given, parsers


def _placed(day):
    return f"{day}T10:00:00+00:00"


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('an order delivered on "{delivered}" and refunded on "{refunded}" for "{amount}"'),
    target_fixture="raw",
)
def _refunded_order(delivered_refunded_order, delivered, refunded, amount):
    return delivered_refunded_order(delivered=delivered, refunded=refunded, amount=amount)


@given(
    parsers.cfparse('an order delivered on "{delivered}" and partially refunded on "{refunded}" for "{amount}"'),
    target_fixture="raw",
)
def _partially_refunded_order(delivered_refunded_order, delivered, refunded, amount):
    return delivered_refunded_order(
        delivered=delivered,
        refunded=refunded,
        amount=amount,
        financial_status="partially_refunded",
    )


@given(parsers.cfparse('an order placed on "{placed}" that was never fulfilled'), target_fixture="raw")
def _unfulfilled_order(raw_order, placed):
    return raw_order(created_at=_placed(placed), fulfillments=[], refunds=[])


@given("no orders", target_fixture="raw_orders")
def _no_orders():
    return []


@given(
    parsers.cfparse(
        'an order placed on "{placed}" delivered on "{delivered}" and refunded on "{refunded}" for "{amount}"'
    ),
    target_fixture="raw_orders",
)
def _placed_and_refunded(delivered_refunded_order, placed, delivered, refunded, amount):
    return [delivered_refunded_order(created_at=_placed(placed), delivered=delivered, refunded=refunded, amount=amount)]


@given(
    parsers.cfparse(
        'an order placed on "{placed}" delivered on "{delivered}" and partially refunded on "{refunded}" for "{amount}"'
    ),
    target_fixture="raw_orders",
)
def _placed_and_partially_refunded(delivered_refunded_order, placed, delivered, refunded, amount):
    return [
        delivered_refunded_order(
            created_at=_placed(placed),
            delivered=delivered,
            refunded=refunded,
            amount=amount,
            financial_status="partially_refunded",
        )
    ]
