import os
from datetime import date
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def _wholesale_domain(request):
    """Initialize the wholesale domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from wholesale.domain import wholesale

    wholesale.init()
    return wholesale


@pytest.fixture(scope="session", autouse=True)
def setup_db(_wholesale_domain):
    from wholesale.utils.db import drop_db, setup_db

    setup_db(_wholesale_domain)

    yield

    drop_db(_wholesale_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_wholesale_domain, monkeypatch):
    """Push domain context before each test, cleanup after."""
    for name in (
        "WHOLESALE_ADMIN_IDS",
        "WHOLESALE_CURRENCY",
        "WHOLESALE_PRICE_LIST_SELF_ACTIVATION",
        "WHOLESALE_APPROVAL_NOTIFICATIONS",
        "WHOLESALE_ORDER_NUMBER_ATTEMPTS",
    ):
        monkeypatch.delenv(name, raising=False)

    ctx = _wholesale_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------
@pytest.fixture
def admin():
    from wholesale.shared.identity import Actor

    return Actor(user_id="admin-001", role="admin", name="Ada Admin")


@pytest.fixture
def supplier():
    from wholesale.shared.identity import Actor

    return Actor(user_id="sup-001", role="supplier", name="Fresh Fish Co")


@pytest.fixture
def other_supplier():
    from wholesale.shared.identity import Actor

    return Actor(user_id="sup-002", role="supplier", name="Harbour Seafood")


@pytest.fixture
def customer():
    from wholesale.shared.identity import Actor

    return Actor(user_id="cust-001", role="customer", name="Bistro Marin")


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
@pytest.fixture
def make_catalogue_entry():
    """Create a category and a product in it; returns (category_id, product_id)."""
    from protean import current_domain

    from wholesale.catalogue.management import CreateCategory, CreateProduct
    from wholesale.shared.identity import actor_fields

    def _make(actor, name="Sea Bream", category_name="Whole Fish", vac=True):
        category_id = current_domain.process(
            CreateCategory(
                supplier_id=actor.user_id,
                name=category_name,
                enable_vac_pricing=vac,
                **actor_fields(actor),
            ),
            asynchronous=False,
        )
        product_id = current_domain.process(
            CreateProduct(
                supplier_id=actor.user_id,
                category_id=category_id,
                name=name,
                **actor_fields(actor),
            ),
            asynchronous=False,
        )
        return category_id, product_id

    return _make


@pytest.fixture
def make_price_list():
    """Create a draft price list for a supplier, optionally priced and activated."""
    from protean import current_domain

    from wholesale.price_list.drafting import CreatePriceList, SetPriceListItem, SetVacSurcharge
    from wholesale.price_list.lifecycle import ActivatePriceList
    from wholesale.shared.identity import actor_fields

    def _make(
        actor,
        effective_date=date(2024, 1, 8),
        expiry_date=date(2024, 1, 14),
        prices=None,
        surcharges=None,
        activate=False,
    ):
        price_list_id = current_domain.process(
            CreatePriceList(
                supplier_id=actor.user_id,
                supplier_name=actor.name,
                effective_date=effective_date,
                expiry_date=expiry_date,
                **actor_fields(actor),
            ),
            asynchronous=False,
        )
        for product_id, price in (prices or {}).items():
            current_domain.process(
                SetPriceListItem(
                    price_list_id=price_list_id,
                    product_id=product_id,
                    price_box=price,
                    **actor_fields(actor),
                ),
                asynchronous=False,
            )
        for category_id, surcharge in (surcharges or {}).items():
            current_domain.process(
                SetVacSurcharge(
                    price_list_id=price_list_id,
                    category_id=category_id,
                    surcharge=surcharge,
                    **actor_fields(actor),
                ),
                asynchronous=False,
            )
        if activate:
            current_domain.process(
                ActivatePriceList(price_list_id=price_list_id, **actor_fields(actor)),
                asynchronous=False,
            )
        return price_list_id

    return _make


@pytest.fixture
def associate():
    """Create an active association between a customer and a supplier."""
    from protean import current_domain

    from wholesale.association.management import CreateAssociation
    from wholesale.shared.identity import Actor, actor_fields

    admin = Actor(user_id="admin-001", role="admin", name="Ada Admin")

    def _associate(customer, supplier):
        return current_domain.process(
            CreateAssociation(
                customer_id=customer.user_id,
                customer_name=customer.name,
                supplier_id=supplier.user_id,
                supplier_name=supplier.name,
                **actor_fields(admin),
            ),
            asynchronous=False,
        )

    return _associate


@pytest.fixture
def ordering_setup(supplier, customer, make_catalogue_entry, make_price_list, associate):
    """An associated customer and a supplier with an active, priced list.

    Sea Bream (VAC category, €10.00/box, €1.50/kg surcharge) and
    Mussels (no VAC, €4.25/box).
    """
    category_id, product_id = make_catalogue_entry(supplier)
    plain_category_id, plain_product_id = make_catalogue_entry(
        supplier, name="Mussels", category_name="Shellfish", vac=False
    )
    price_list_id = make_price_list(
        supplier,
        prices={product_id: 10.0, plain_product_id: 4.25},
        surcharges={category_id: 1.5},
        activate=True,
    )
    associate(customer, supplier)
    return {
        "price_list_id": price_list_id,
        "category_id": category_id,
        "product_id": product_id,
        "plain_category_id": plain_category_id,
        "plain_product_id": plain_product_id,
    }


@pytest.fixture
def placed_order(customer, supplier, ordering_setup):
    """An order for 3 regular + 2 VAC boxes of Sea Bream, awaiting approval."""
    from wholesale.approvals import place_order

    return place_order(
        customer,
        supplier.user_id,
        ordering_setup["price_list_id"],
        [{"product_id": ordering_setup["product_id"], "quantity_regular": 3, "quantity_vac": 2}],
    )
