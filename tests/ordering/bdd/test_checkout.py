"""BDD tests for checkout and the stock consequences of order status changes."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.catalogue.product import Product
from storefront.ordering.checkout.flow import checkout
from storefront.ordering.order import Order
from storefront.ordering.status import update_order_status
from storefront.shared.errors import IllegalTransition, InsufficientStock

scenarios("features/checkout.feature")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured checkout/status errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def placed():
    return {"order": None}


@pytest.fixture(autouse=True)
def _gateway(fake_gateway):
    return fake_gateway


def _checkout(customer, products, placed, error, cart, method):
    items = [{"product_id": str(products[name].id), "quantity": quantity} for name, quantity in cart]
    try:
        placed["order"] = checkout(str(customer.id), items, shipping_address=_ADDRESS, payment_method=method)
    except InsufficientStock as exc:
        error["exc"] = exc


_ADDRESS = {
    "full_name": "Asha Rao",
    "address_line1": "12 MG Road",
    "city": "Bengaluru",
    "state": "KA",
    "postal_code": "560001",
    "country": "IN",
    "phone": "+91-9000000000",
}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered customer")
def registered_customer(customer):
    assert customer.id


@given(parsers.cfparse('a product "{name}" priced at {price:d} with {stock:d} in stock'))
def product_in_stock(make_product, products, name, price, stock):
    products[name] = make_product(name=name, price_cents=price, stock=stock)


@given(parsers.cfparse('the customer has checked out {quantity:d} of "{name}" paying with "{method}"'))
def has_checked_out(customer, products, placed, error, quantity, name, method):
    _checkout(customer, products, placed, error, [(name, quantity)], method)
    assert placed["order"] is not None


@given(parsers.cfparse('the order is moved to "{status}"'))
def order_was_moved(placed, status):
    placed["order"] = update_order_status(str(placed["order"].id), status)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer checks out {quantity:d} of "{name}" paying with "{method}"'))
def checks_out(customer, products, placed, error, quantity, name, method):
    _checkout(customer, products, placed, error, [(name, quantity)], method)


@when("the customer checks out a cart of")
def checks_out_cart(customer, products, placed, error, datatable):
    cart = [(row[0], int(row[1])) for row in datatable[1:]]
    _checkout(customer, products, placed, error, cart, "mock")


@when(parsers.cfparse('the order is moved to "{status}"'))
def move_order(placed, error, status):
    try:
        placed["order"] = update_order_status(str(placed["order"].id), status)
    except IllegalTransition as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is placed with status "{status}"'))
def order_has_status(placed, status):
    order = current_domain.repository_for(Order).find_by_id(str(placed["order"].id))
    assert order.status == status


@then(parsers.cfparse("the order total is {total:d}"))
def order_total(placed, total):
    assert placed["order"].total_cents == total


@then("the order has a payment reference")
def has_reference(placed):
    assert placed["order"].payment_reference


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def product_stock(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name].id).stock == stock


@then(parsers.cfparse('checkout is rejected for insufficient stock at "{stage}"'))
def rejected_for_stock(error, stage):
    assert isinstance(error["exc"], InsufficientStock)
    assert error["exc"].stage == stage


@then("no order exists")
def no_order(placed):
    assert placed["order"] is None
    assert current_domain.repository_for(Order).find_all().total == 0


@then("the status change is rejected")
def status_rejected(error):
    assert isinstance(error["exc"], IllegalTransition)
