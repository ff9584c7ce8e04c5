import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the Protean config overlay before the domain module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_domain():
    """Initialize the storefront domain once per session."""
    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront_domain)

    yield

    drop_db(storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain
    from storefront.catalogue.stock_guard import stock_guard
    from storefront.payments.gateway import reset_gateway

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    stock_guard.reset()
    reset_gateway()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared factories
# ---------------------------------------------------------------------------
@pytest.fixture
def shipping_address():
    return {
        "full_name": "Asha Rao",
        "address_line1": "12 MG Road",
        "address_line2": None,
        "city": "Bengaluru",
        "state": "KA",
        "postal_code": "560001",
        "country": "IN",
        "phone": "+91-9000000000",
    }


def _register(name, email, role):
    from protean import current_domain
    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import User

    user_id = current_domain.process(RegisterUser(name=name, email=email, role=role), asynchronous=False)
    return current_domain.repository_for(User).get(user_id)


@pytest.fixture
def customer():
    return _register("Asha Rao", "asha@example.com", "CUSTOMER")


@pytest.fixture
def other_customer():
    return _register("Vikram Shah", "vikram@example.com", "CUSTOMER")


@pytest.fixture
def admin():
    return _register("Store Admin", "admin@example.com", "ADMIN")


@pytest.fixture
def make_product():
    """Create a product through the catalog command and return the stored aggregate."""
    from protean import current_domain
    from storefront.catalogue.management import create_product
    from storefront.catalogue.product import Product

    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "name": f"Silk Kurta {counter['n']}",
            "sku": f"KURTA-{counter['n']:03d}",
            "price_cents": 100000,
            "stock": 5,
            "sizes": ["S", "M", "L"],
            "colors": ["Red", "Blue"],
        }
        fields.update(overrides)
        product_id = create_product(**fields)
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture
def fake_gateway():
    from storefront.payments.gateway import set_gateway
    from storefront.payments.gateway.fake_adapter import FakeGateway

    gateway = FakeGateway()
    set_gateway(gateway)
    return gateway
