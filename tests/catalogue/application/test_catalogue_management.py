"""Application tests for catalogue management handlers and queries."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from wholesale.catalogue.category import ProductCategory
from wholesale.catalogue.management import (
    CreateCategory,
    CreateProduct,
    DeactivateCategory,
    UpdateProduct,
)
from wholesale.catalogue.product import Product
from wholesale.catalogue.queries import categories_for_supplier, product_catalogue, products_for_supplier
from wholesale.shared.exceptions import AuthorizationError
from wholesale.shared.identity import actor_fields


class TestCategoryHandlers:
    def test_supplier_creates_own_category(self, supplier):
        category_id = current_domain.process(
            CreateCategory(supplier_id=supplier.user_id, name="Whole Fish", **actor_fields(supplier)),
            asynchronous=False,
        )
        category = current_domain.repository_for(ProductCategory).get(category_id)
        assert category.supplier_id == supplier.user_id

    def test_supplier_cannot_create_for_another_supplier(self, supplier, other_supplier):
        with pytest.raises(AuthorizationError):
            current_domain.process(
                CreateCategory(supplier_id=other_supplier.user_id, name="Whole Fish", **actor_fields(supplier)),
                asynchronous=False,
            )

    def test_customer_cannot_create_category(self, customer):
        with pytest.raises(AuthorizationError):
            current_domain.process(
                CreateCategory(supplier_id="sup-001", name="Whole Fish", **actor_fields(customer)),
                asynchronous=False,
            )

    def test_deactivating_category_deactivates_its_products(self, supplier, make_catalogue_entry):
        category_id, product_id = make_catalogue_entry(supplier)
        current_domain.process(
            DeactivateCategory(category_id=category_id, **actor_fields(supplier)),
            asynchronous=False,
        )

        assert current_domain.repository_for(Product).get(product_id).is_active is False
        assert categories_for_supplier(supplier.user_id) == []
        assert len(categories_for_supplier(supplier.user_id, include_inactive=True)) == 1


class TestProductHandlers:
    def test_product_inherits_category_unit(self, supplier):
        category_id = current_domain.process(
            CreateCategory(
                supplier_id=supplier.user_id, name="Fillets", unit_of_measure="kg", **actor_fields(supplier)
            ),
            asynchronous=False,
        )
        product_id = current_domain.process(
            CreateProduct(
                supplier_id=supplier.user_id, category_id=category_id, name="Cod Fillet", **actor_fields(supplier)
            ),
            asynchronous=False,
        )
        assert current_domain.repository_for(Product).get(product_id).unit_of_measure == "kg"

    def test_product_in_another_suppliers_category_rejected(self, supplier, other_supplier, make_catalogue_entry):
        category_id, _ = make_catalogue_entry(other_supplier)
        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                CreateProduct(
                    supplier_id=supplier.user_id, category_id=category_id, name="Cod", **actor_fields(supplier)
                ),
                asynchronous=False,
            )
        assert "another supplier" in str(exc.value)

    def test_rename_product(self, supplier, make_catalogue_entry):
        _, product_id = make_catalogue_entry(supplier)
        current_domain.process(
            UpdateProduct(product_id=product_id, name="Gilthead Bream", **actor_fields(supplier)),
            asynchronous=False,
        )
        assert [p.name for p in products_for_supplier(supplier.user_id)] == ["Gilthead Bream"]


class TestProductCatalogue:
    def test_resolves_category_facts(self, supplier, make_catalogue_entry):
        category_id, product_id = make_catalogue_entry(supplier)
        entry = product_catalogue([product_id])[product_id]
        assert entry.product_name == "Sea Bream"
        assert entry.category_id == category_id
        assert entry.category_name == "Whole Fish"
        assert entry.vac_enabled is True

    def test_inactive_product_refused(self, supplier, make_catalogue_entry):
        category_id, product_id = make_catalogue_entry(supplier)
        current_domain.process(
            DeactivateCategory(category_id=category_id, **actor_fields(supplier)),
            asynchronous=False,
        )
        with pytest.raises(ValidationError):
            product_catalogue([product_id])
