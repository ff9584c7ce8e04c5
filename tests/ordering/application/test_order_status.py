import pytest
from protean import current_domain
from storefront.catalogue.product import Product
from storefront.ordering.checkout.flow import checkout
from storefront.ordering.order import OrderStatus
from storefront.ordering.status import update_order_status
from storefront.shared.errors import IllegalTransition, InvalidArgument, NotFound


@pytest.fixture
def kurta(make_product):
    return make_product(stock=5)


@pytest.fixture
def pending_order(customer, kurta, shipping_address, fake_gateway):
    return checkout(str(customer.id), [{"product_id": str(kurta.id), "quantity": 2}], shipping_address, "gateway")


@pytest.fixture
def paid_order(customer, kurta, shipping_address):
    return checkout(str(customer.id), [{"product_id": str(kurta.id), "quantity": 2}], shipping_address, "mock")


def _stock(product):
    return current_domain.repository_for(Product).get(product.id).stock


def test_paid_order_ships_then_delivers(paid_order):
    shipped = update_order_status(str(paid_order.id), "SHIPPED")
    assert shipped.status == OrderStatus.SHIPPED.value

    delivered = update_order_status(str(paid_order.id), "DELIVERED")
    assert delivered.status == OrderStatus.DELIVERED.value


def test_cancelling_pending_order_returns_stock(pending_order, kurta):
    assert _stock(kurta) == 3

    cancelled = update_order_status(str(pending_order.id), "CANCELLED", reason="customer request")

    assert cancelled.status == OrderStatus.CANCELLED.value
    assert _stock(kurta) == 5


def test_cancelling_paid_order_returns_stock(paid_order, kurta):
    update_order_status(str(paid_order.id), "CANCELLED")
    assert _stock(kurta) == 5


def test_cancelled_order_cannot_be_cancelled_again(pending_order, kurta):
    update_order_status(str(pending_order.id), "CANCELLED")

    with pytest.raises(IllegalTransition):
        update_order_status(str(pending_order.id), "CANCELLED")
    assert _stock(kurta) == 5


def test_pending_cannot_skip_to_shipped(pending_order):
    with pytest.raises(IllegalTransition):
        update_order_status(str(pending_order.id), "SHIPPED")


def test_shipped_order_cannot_be_cancelled(paid_order, kurta):
    update_order_status(str(paid_order.id), "SHIPPED")

    with pytest.raises(IllegalTransition):
        update_order_status(str(paid_order.id), "CANCELLED")
    assert _stock(kurta) == 3


def test_paid_needs_override(pending_order):
    with pytest.raises(IllegalTransition):
        update_order_status(str(pending_order.id), "PAID")

    order = update_order_status(str(pending_order.id), "PAID", override=True, reason="paid offline")
    assert order.status == OrderStatus.PAID.value


@pytest.mark.parametrize("status", ["RETURNED", "shipped", ""])
def test_unknown_status_is_invalid_argument(pending_order, status):
    with pytest.raises(InvalidArgument):
        update_order_status(str(pending_order.id), status)


def test_unknown_order():
    with pytest.raises(NotFound):
        update_order_status("missing-order", "CANCELLED")
