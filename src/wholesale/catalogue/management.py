"""Catalogue management — commands and handlers for categories and products."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from wholesale.catalogue.category import ProductCategory
from wholesale.catalogue.product import Product
from wholesale.domain import wholesale
from wholesale.shared.identity import actor_from, require_supplier_or_admin

logger = structlog.get_logger(__name__)


@wholesale.command(part_of="ProductCategory")
class CreateCategory:
    supplier_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    enable_vac_pricing: Boolean(default=False)
    unit_of_measure: String(max_length=50)
    display_order: Integer(default=0)
    description: String(max_length=500)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="ProductCategory")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=255)
    enable_vac_pricing: Boolean()
    unit_of_measure: String(max_length=50)
    description: String(max_length=500)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="ProductCategory")
class DeactivateCategory:
    category_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command_handler(part_of=ProductCategory)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        require_supplier_or_admin(actor_from(command), command.supplier_id)

        category = ProductCategory.create(
            supplier_id=command.supplier_id,
            name=command.name,
            enable_vac_pricing=bool(command.enable_vac_pricing),
            unit_of_measure=command.unit_of_measure,
            display_order=command.display_order or 0,
            description=command.description,
        )
        current_domain.repository_for(ProductCategory).add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(ProductCategory)
        category = repo.get(command.category_id)
        require_supplier_or_admin(actor_from(command), category.supplier_id)

        category.update_details(
            name=command.name,
            enable_vac_pricing=command.enable_vac_pricing,
            unit_of_measure=command.unit_of_measure,
            description=command.description,
        )
        repo.add(category)

    @handle(DeactivateCategory)
    def deactivate_category(self, command):
        """Deactivate the category and every product filed under it."""
        repo = current_domain.repository_for(ProductCategory)
        category = repo.get(command.category_id)
        require_supplier_or_admin(actor_from(command), category.supplier_id)

        category.deactivate()
        repo.add(category)

        product_repo = current_domain.repository_for(Product)
        products = product_repo._dao.query.filter(category_id=str(category.id), is_active=True).limit(1000).all().items
        for product in products:
            product.deactivate(reason=f"Category {category.name} deactivated")
            product_repo.add(product)

        logger.info(
            "Category deactivated",
            category_id=str(category.id),
            products_deactivated=len(products),
        )


@wholesale.command(part_of="Product")
class CreateProduct:
    supplier_id: Identifier(required=True)
    category_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    unit_of_measure: String(max_length=50)
    display_order: Integer(default=0)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    category_id: Identifier()
    unit_of_measure: String(max_length=50)
    display_order: Integer()
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


def _active_category_of(supplier_id, category_id):
    category = current_domain.repository_for(ProductCategory).get(category_id)
    if str(category.supplier_id) != str(supplier_id):
        raise ValidationError({"category_id": ["Category belongs to another supplier"]})
    if not category.is_active:
        raise ValidationError({"category_id": ["Category is inactive"]})
    return category


@wholesale.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        require_supplier_or_admin(actor_from(command), command.supplier_id)
        category = _active_category_of(command.supplier_id, command.category_id)

        product = Product.create(
            supplier_id=command.supplier_id,
            category_id=command.category_id,
            name=command.name,
            unit_of_measure=command.unit_of_measure or category.unit_of_measure,
            display_order=command.display_order or 0,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        require_supplier_or_admin(actor_from(command), product.supplier_id)
        if command.category_id:
            _active_category_of(product.supplier_id, command.category_id)

        product.update_details(
            name=command.name,
            category_id=command.category_id,
            unit_of_measure=command.unit_of_measure,
            display_order=command.display_order,
        )
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        require_supplier_or_admin(actor_from(command), product.supplier_id)
        product.deactivate()
        repo.add(product)
