"""Read accessors for the supplier catalogue."""

from dataclasses import dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from wholesale.catalogue.category import ProductCategory
from wholesale.catalogue.product import Product


@dataclass(frozen=True)
class CatalogueEntry:
    """Product facts needed to price an order line."""

    product_id: str
    product_name: str
    category_id: str
    category_name: str
    vac_enabled: bool


def categories_for_supplier(supplier_id, include_inactive=False):
    query = current_domain.repository_for(ProductCategory)._dao.query.filter(supplier_id=str(supplier_id))
    if not include_inactive:
        query = query.filter(is_active=True)
    return query.order_by("display_order").limit(1000).all().items


def products_for_supplier(supplier_id, include_inactive=False):
    query = current_domain.repository_for(Product)._dao.query.filter(supplier_id=str(supplier_id))
    if not include_inactive:
        query = query.filter(is_active=True)
    return query.order_by("display_order").limit(1000).all().items


def product_catalogue(product_ids) -> dict[str, CatalogueEntry]:
    """Resolve products to their categories, keyed by product id.

    Inactive products and products in inactive categories are refused so a
    deactivated line can never be ordered.
    """
    product_repo = current_domain.repository_for(Product)
    category_repo = current_domain.repository_for(ProductCategory)
    categories = {}
    entries = {}

    for product_id in product_ids:
        product = product_repo.get(product_id)
        if not product.is_active:
            raise ValidationError({"product_id": [f"Product {product.name} is no longer available"]})

        category_id = str(product.category_id)
        if category_id not in categories:
            categories[category_id] = category_repo.get(category_id)
        category = categories[category_id]
        if not category.is_active:
            raise ValidationError({"product_id": [f"Category {category.name} is no longer available"]})

        entries[str(product.id)] = CatalogueEntry(
            product_id=str(product.id),
            product_name=product.name,
            category_id=category_id,
            category_name=category.name,
            vac_enabled=bool(category.enable_vac_pricing),
        )
    return entries
