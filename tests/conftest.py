import os
from datetime import UTC, date, datetime
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config overlay and keep the background sweeper out of the
    application under test; sweeper tests drive it explicitly.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["CART_SWEEPER_ENABLED"] = "false"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path or "/bdd/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def bookshop_bed():
    from bookshop.domain import bookshop

    bed = DomainFixture(bookshop)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(bookshop_bed):
    from bookshop.domain import bookshop
    from bookshop.utils.db import drop_db, setup_db

    setup_db(bookshop)

    yield

    drop_db(bookshop)


@pytest.fixture(autouse=True)
def _ctx(bookshop_bed):
    with bookshop_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from bookshop.catalogue import reset_catalogue
    from bookshop.identity import reset_directory
    from protean import current_domain

    reset_catalogue()
    reset_directory()

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------
def _born_years_ago(years: int) -> date:
    today = datetime.now(UTC).date()
    return date(today.year - years, 1, 1)


@pytest.fixture()
def make_item():
    """Store an Item and return its id."""
    from bookshop.catalogue.item import Item
    from protean import current_domain

    def _make(name="The Hobbit", price=25.0, stock=10, minimum_age=0, average_rating=4.5):
        item = Item(
            name=name,
            price=price,
            amount_in_stock=stock,
            minimum_age=minimum_age,
            average_rating=average_rating,
        )
        current_domain.repository_for(Item).add(item)
        return str(item.id)

    return _make


@pytest.fixture()
def make_customer():
    """Store a Customer of the given age and return its id."""
    from bookshop.identity.customer import Customer
    from protean import current_domain

    def _make(username="reader", age=30):
        customer = Customer(username=username, date_of_birth=_born_years_ago(age))
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)

    return _make
