from datetime import timedelta

import pytest
from storefront.analytics.orders import order_analytics
from storefront.ordering.checkout.flow import checkout
from storefront.ordering.status import update_order_status
from storefront.shared.clock import utcnow
from storefront.shared.errors import InvalidArgument


@pytest.fixture
def buy(customer, make_product, shipping_address):
    kurta = make_product(price_cents=100000, stock=50)

    def _buy(quantity, method="mock"):
        items = [{"product_id": str(kurta.id), "quantity": quantity}]
        return checkout(str(customer.id), items, shipping_address, method)

    return _buy


def test_no_orders_yields_zeros():
    result = order_analytics()
    assert result.revenue_cents == 0
    assert result.order_count == 0
    assert result.days == 30


def test_revenue_counts_paid_orders_only(buy, fake_gateway):
    buy(2)
    buy(1)
    buy(3, method="gateway")  # PENDING
    cancelled = buy(1)
    update_order_status(str(cancelled.id), "CANCELLED")

    result = order_analytics(days=7)

    assert result.revenue_cents == 300000
    assert result.order_count == 4


def test_window_excludes_older_orders(buy):
    buy(1)
    result = order_analytics(days=1, as_of=utcnow() + timedelta(days=2))
    assert result.order_count == 0
    assert result.revenue_cents == 0


@pytest.mark.parametrize("days", [0, -5])
def test_window_must_be_positive(days):
    with pytest.raises(InvalidArgument):
        order_analytics(days=days)
