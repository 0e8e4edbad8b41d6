"""Application tests for price list drafting handlers and read accessors."""

from datetime import date

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from wholesale.price_list.drafting import (
    CreatePriceList,
    RemovePriceListItem,
    SetPriceListItem,
    UpdatePriceListDetails,
)
from wholesale.price_list.lifecycle import SubmitPriceList
from wholesale.price_list.price_list import PriceList
from wholesale.price_list.queries import get_active_by_supplier, get_price_list, get_with_items
from wholesale.shared.exceptions import AuthorizationError, ConflictError
from wholesale.shared.identity import actor_fields


class TestCreatePriceList:
    def test_admin_creates_for_supplier(self, admin, supplier):
        price_list_id = current_domain.process(
            CreatePriceList(
                supplier_id=supplier.user_id,
                supplier_name=supplier.name,
                effective_date=date(2024, 1, 8),
                expiry_date=date(2024, 1, 14),
                **actor_fields(admin),
            ),
            asynchronous=False,
        )
        price_list = current_domain.repository_for(PriceList).get(price_list_id)
        assert price_list.created_by == admin.user_id
        assert price_list.name == "PRICES ETA MON/SUN 14-01-2024"

    def test_customer_cannot_create(self, customer):
        with pytest.raises(AuthorizationError):
            current_domain.process(
                CreatePriceList(
                    supplier_id="sup-001",
                    supplier_name="Fresh Fish Co",
                    effective_date=date(2024, 1, 8),
                    expiry_date=date(2024, 1, 14),
                    **actor_fields(customer),
                ),
                asynchronous=False,
            )


class TestItems:
    def test_list_and_items_use_configured_currency(self, supplier, make_catalogue_entry, make_price_list, monkeypatch):
        monkeypatch.setenv("WHOLESALE_CURRENCY", "SEK")
        _, product_id = make_catalogue_entry(supplier)
        price_list_id = make_price_list(supplier, prices={product_id: 95.0})

        price_list = current_domain.repository_for(PriceList).get(price_list_id)
        assert price_list.currency == "SEK"
        assert price_list.item_for(product_id).currency == "SEK"

    def test_explicit_list_currency(self, supplier):
        price_list_id = current_domain.process(
            CreatePriceList(
                supplier_id=supplier.user_id,
                supplier_name=supplier.name,
                effective_date=date(2024, 1, 8),
                expiry_date=date(2024, 1, 14),
                currency="nok",
                **actor_fields(supplier),
            ),
            asynchronous=False,
        )
        assert current_domain.repository_for(PriceList).get(price_list_id).currency == "NOK"

    def test_item_in_foreign_currency_rejected(self, supplier, make_catalogue_entry, make_price_list):
        _, product_id = make_catalogue_entry(supplier)
        price_list_id = make_price_list(supplier)
        with pytest.raises(ValidationError):
            current_domain.process(
                SetPriceListItem(
                    price_list_id=price_list_id,
                    product_id=product_id,
                    price_box=9.0,
                    currency="USD",
                    **actor_fields(supplier),
                ),
                asynchronous=False,
            )

    def test_product_of_another_supplier_rejected(self, supplier, other_supplier, make_catalogue_entry, make_price_list):
        _, product_id = make_catalogue_entry(other_supplier)
        price_list_id = make_price_list(supplier)
        with pytest.raises(ValidationError):
            current_domain.process(
                SetPriceListItem(
                    price_list_id=price_list_id, product_id=product_id, price_box=9.0, **actor_fields(supplier)
                ),
                asynchronous=False,
            )

    def test_edit_pending_list_rejected(self, supplier, make_catalogue_entry, make_price_list):
        _, product_id = make_catalogue_entry(supplier)
        price_list_id = make_price_list(supplier)
        current_domain.process(
            SubmitPriceList(price_list_id=price_list_id, **actor_fields(supplier)), asynchronous=False
        )
        with pytest.raises(ConflictError):
            current_domain.process(
                SetPriceListItem(
                    price_list_id=price_list_id, product_id=product_id, price_box=9.0, **actor_fields(supplier)
                ),
                asynchronous=False,
            )

    def test_remove_item(self, supplier, make_catalogue_entry, make_price_list):
        _, product_id = make_catalogue_entry(supplier)
        price_list_id = make_price_list(supplier, prices={product_id: 9.0})
        current_domain.process(
            RemovePriceListItem(price_list_id=price_list_id, product_id=product_id, **actor_fields(supplier)),
            asynchronous=False,
        )
        assert get_price_list(price_list_id)["item_count"] == 0


class TestDetails:
    def test_reschedule_renames(self, supplier, make_price_list):
        price_list_id = make_price_list(supplier)
        current_domain.process(
            UpdatePriceListDetails(
                price_list_id=price_list_id,
                effective_date=date(2024, 1, 9),
                expiry_date=date(2024, 1, 10),
                notes="Storm week",
                **actor_fields(supplier),
            ),
            asynchronous=False,
        )
        data = get_price_list(price_list_id)
        assert data["name"] == "PRICES ETA TUE/WED 10-01-2024"
        assert data["notes"] == "Storm week"


class TestReadAccessors:
    def test_no_active_list(self, supplier):
        assert get_active_by_supplier(supplier.user_id) is None

    def test_with_items_joins_catalogue(self, supplier, make_catalogue_entry, make_price_list):
        category_id, product_id = make_catalogue_entry(supplier)
        price_list_id = make_price_list(supplier, prices={product_id: 10.0}, surcharges={category_id: 1.5})

        data = get_with_items(price_list_id)
        assert data["vac_surcharges"] == {category_id: 1.5}
        (row,) = data["items"]
        assert row["product_name"] == "Sea Bream"
        assert row["category_name"] == "Whole Fish"
        assert row["vac_enabled"] is True
        assert row["category_vac_surcharge"] == 1.5
