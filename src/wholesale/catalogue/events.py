"""Domain events for the supplier catalogue (categories and products)."""

from protean.fields import Boolean, DateTime, Identifier, String

from wholesale.domain import wholesale


@wholesale.event(part_of="ProductCategory")
class CategoryCreated:
    __version__ = 1

    category_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    name: String(required=True)
    enable_vac_pricing: Boolean(default=False)


@wholesale.event(part_of="ProductCategory")
class CategoryUpdated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    enable_vac_pricing: Boolean(default=False)
    unit_of_measure: String()


@wholesale.event(part_of="ProductCategory")
class CategoryDeactivated:
    __version__ = 1

    category_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)


@wholesale.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    category_id: Identifier(required=True)
    name: String(required=True)


@wholesale.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    category_id: Identifier(required=True)
    name: String(required=True)
    unit_of_measure: String()


@wholesale.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id: Identifier(required=True)
    reason: String()
    deactivated_at: DateTime(required=True)
