import json
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
    """Pytest hook to run before collecting tests.

    Selects the config overlay before any test module imports the domain.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    for var in ("SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS"):
        os.environ.pop(var, None)


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
def _storefront_domain():
    """Initialize the storefront domain once per session."""
    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    from storefront.notifications.channel import reset_channels

    ctx = _storefront_domain.domain_context()
    ctx.push()
    reset_channels()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    reset_channels()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def email_adapter():
    """The recording email adapter every notification goes through."""
    from storefront.notifications.channel import get_channel

    return get_channel("Email")


@pytest.fixture()
def register_account():
    from protean import current_domain
    from storefront.identity.account import Account, Role

    def _register(full_name="Asha Rao", email=None, admin=False, **kwargs):
        email = email or f"{full_name.split()[0].lower()}-{os.urandom(3).hex()}@example.com"
        account = Account.register(
            full_name=full_name,
            email=email,
            role=Role.ADMIN.value if admin else Role.CUSTOMER.value,
            **kwargs,
        )
        current_domain.repository_for(Account).add(account)
        return current_domain.repository_for(Account).get(account.id)

    return _register


@pytest.fixture()
def admin(register_account):
    return register_account("Store Admin", email="admin@storefront.example", admin=True)


@pytest.fixture()
def customer(register_account):
    return register_account("Asha Rao", email="asha@example.com")


@pytest.fixture()
def add_product(admin):
    from protean import current_domain
    from storefront.catalogue.management import AddProduct

    def _add(name="Filter Coffee Maker", price=100.0, stock=10, category="Kitchen", **kwargs):
        return current_domain.process(
            AddProduct(
                name=name,
                price=price,
                stock=stock,
                category=category,
                added_by=str(admin.id),
                **kwargs,
            ),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def place_order():
    """Place an order through the command handler; lines are (product_id, quantity[, price])."""
    from protean import current_domain
    from storefront.ordering.placement import PlaceOrder

    def _place(account, lines, total_amount=None, payment_method="cod", delivery_address=None):
        items = []
        for line in lines:
            product_id, quantity, *rest = line
            item = {"product_id": product_id, "quantity": quantity}
            if rest:
                item["price"] = rest[0]
            items.append(item)
        if total_amount is None:
            total_amount = float(sum(i.get("price", 0.0) * i["quantity"] for i in items))
        return current_domain.process(
            PlaceOrder(
                customer_id=str(account.id),
                items=json.dumps(items),
                total_amount=total_amount,
                payment_method=payment_method,
                delivery_address=json.dumps(delivery_address) if delivery_address else None,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def stock_of():
    from protean import current_domain
    from storefront.inventory.stock import StockItem

    def _stock(product_id):
        return current_domain.repository_for(StockItem).get(str(product_id)).available

    return _stock
