"""Concurrent checkouts against the same product never oversell."""

import threading

import pytest
from protean import current_domain
from storefront.catalogue.product import Product
from storefront.ordering.checkout.flow import checkout
from storefront.ordering.order import Order
from storefront.shared.errors import InsufficientStock

pytestmark = pytest.mark.slow


def _run_concurrently(storefront_domain, count, target):
    barrier = threading.Barrier(count)
    results: list = [None] * count

    def _worker(index):
        with storefront_domain.domain_context():
            barrier.wait()
            try:
                results[index] = target()
            except Exception as exc:  # collected for assertions
                results[index] = exc

    threads = [threading.Thread(target=_worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results


@pytest.mark.parametrize("stock, buyers", [(1, 2), (3, 8)])
def test_exactly_available_stock_is_sold(storefront_domain, customer, make_product, shipping_address, stock, buyers):
    kurta = make_product(stock=stock)
    user_id = str(customer.id)

    results = _run_concurrently(
        storefront_domain,
        buyers,
        lambda: checkout(user_id, [{"product_id": str(kurta.id), "quantity": 1}], shipping_address, "mock"),
    )

    orders = [r for r in results if isinstance(r, Order)]
    rejections = [r for r in results if isinstance(r, InsufficientStock)]
    assert len(orders) == stock
    assert len(rejections) == buyers - stock
    assert current_domain.repository_for(Product).get(kurta.id).stock == 0
    assert len(current_domain.repository_for(Order).find_all(page=0, size=100).items) == stock


def test_overlapping_carts_keep_totals_consistent(storefront_domain, customer, make_product, shipping_address):
    kurta = make_product(stock=4)
    saree = make_product(stock=4)
    user_id = str(customer.id)

    forward = [{"product_id": str(kurta.id), "quantity": 1}, {"product_id": str(saree.id), "quantity": 1}]
    backward = list(reversed(forward))
    carts = [forward, backward] * 3

    counter = iter(range(len(carts)))
    lock = threading.Lock()

    def _buy():
        with lock:
            cart = carts[next(counter)]
        return checkout(user_id, cart, shipping_address, "mock")

    results = _run_concurrently(storefront_domain, len(carts), _buy)

    sold = len([r for r in results if isinstance(r, Order)])
    assert sold == 4
    assert all(isinstance(r, (Order, InsufficientStock)) for r in results)
    products = current_domain.repository_for(Product)
    assert products.get(kurta.id).stock == 0
    assert products.get(saree.id).stock == 0
