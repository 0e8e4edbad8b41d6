"""Read accessors for price lists.

Everything returned here is a plain dict built from a fresh repository load,
so callers (renderers, HTTP responses) never hold a reference into aggregate
state.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from wholesale.catalogue.category import ProductCategory
from wholesale.catalogue.product import Product
from wholesale.price_list.price_list import PriceList


def _summary(price_list):
    data = price_list.to_dict()
    data.pop("items", None)
    data["vac_surcharges"] = price_list.surcharge_map()
    data["item_count"] = len(price_list.items)
    return data


def get_price_list(price_list_id):
    return _summary(current_domain.repository_for(PriceList).get(price_list_id))


def get_active_by_supplier(supplier_id):
    """The supplier's active list, or None."""
    active = current_domain.repository_for(PriceList).active_for_supplier(supplier_id)
    return _summary(active[0]) if active else None


def get_by_supplier(supplier_id):
    return [_summary(pl) for pl in current_domain.repository_for(PriceList).for_supplier(supplier_id)]


def get_pending_approval():
    return [_summary(pl) for pl in current_domain.repository_for(PriceList).with_status("pending_approval")]


def get_with_items(price_list_id):
    """A list with its items, each joined to its product and category."""
    price_list = current_domain.repository_for(PriceList).get(price_list_id)
    product_repo = current_domain.repository_for(Product)
    category_repo = current_domain.repository_for(ProductCategory)
    surcharges = price_list.surcharge_map()

    categories = {}
    items = []
    for item in price_list.items:
        row = item.to_dict()
        try:
            product = product_repo.get(item.product_id)
        except ObjectNotFoundError:
            product = None
        if product is not None:
            category_id = str(product.category_id)
            if category_id not in categories:
                categories[category_id] = category_repo.get(category_id)
            category = categories[category_id]
            row["product_name"] = product.name
            row["unit_of_measure"] = product.unit_of_measure
            row["display_order"] = product.display_order
            row["category_id"] = category_id
            row["category_name"] = category.name
            row["vac_enabled"] = bool(category.enable_vac_pricing)
            row["category_vac_surcharge"] = surcharges.get(category_id)
        items.append(row)

    items.sort(key=lambda row: (row.get("category_name") or "", row.get("display_order") or 0))

    data = _summary(price_list)
    data["items"] = items
    return data
