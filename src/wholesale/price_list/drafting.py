"""Price list drafting — creating lists and editing their prices.

Edits are accepted while a list is DRAFT or ACTIVE; the aggregate refuses
them once the list is pending approval or archived.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Date, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from wholesale.catalogue.product import Product
from wholesale.config import load_settings
from wholesale.domain import wholesale
from wholesale.price_list.price_list import PriceList
from wholesale.shared.identity import actor_from, require_supplier_or_admin

logger = structlog.get_logger(__name__)


@wholesale.command(part_of="PriceList")
class CreatePriceList:
    supplier_id: Identifier(required=True)
    supplier_name: String(required=True, max_length=255)
    effective_date: Date(required=True)
    expiry_date: Date(required=True)
    notes: String(max_length=1000)
    currency: String(max_length=3)  # defaults to the configured currency
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="PriceList")
class SetPriceListItem:
    price_list_id: Identifier(required=True)
    product_id: Identifier(required=True)
    price_box: Float(required=True)
    price_box_vac: Float()
    vac_surcharge: Float()
    currency: String(max_length=3)
    min_quantity: Integer()
    max_quantity: Integer()
    is_available: Boolean(default=True)
    notes: String(max_length=500)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="PriceList")
class RemovePriceListItem:
    price_list_id: Identifier(required=True)
    product_id: Identifier(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="PriceList")
class SetVacSurcharge:
    price_list_id: Identifier(required=True)
    category_id: Identifier(required=True)
    surcharge: Float()  # None clears the category's surcharge
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="PriceList")
class UpdatePriceListDetails:
    price_list_id: Identifier(required=True)
    effective_date: Date()
    expiry_date: Date()
    notes: String(max_length=1000)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command_handler(part_of=PriceList)
class PriceListDraftingHandler:
    def _editable(self, command):
        repo = current_domain.repository_for(PriceList)
        price_list = repo.get(command.price_list_id)
        require_supplier_or_admin(actor_from(command), price_list.supplier_id)
        return repo, price_list

    @handle(CreatePriceList)
    def create_price_list(self, command):
        actor = actor_from(command)
        require_supplier_or_admin(actor, command.supplier_id)

        price_list = PriceList.create(
            supplier_id=command.supplier_id,
            supplier_name=command.supplier_name,
            effective_date=command.effective_date,
            expiry_date=command.expiry_date,
            created_by=actor.user_id,
            currency=command.currency or load_settings().currency,
            notes=command.notes,
        )
        current_domain.repository_for(PriceList).add(price_list)

        logger.info(
            "Price list created",
            price_list_id=str(price_list.id),
            supplier_id=str(command.supplier_id),
            name=price_list.name,
        )
        return str(price_list.id)

    @handle(SetPriceListItem)
    def set_item(self, command):
        repo, price_list = self._editable(command)
        product = current_domain.repository_for(Product).get(command.product_id)
        if str(product.supplier_id) != str(price_list.supplier_id):
            raise ValidationError({"product_id": ["Product belongs to another supplier"]})
        price_list.set_item(
            product_id=command.product_id,
            price_box=command.price_box,
            price_box_vac=command.price_box_vac,
            vac_surcharge=command.vac_surcharge,
            currency=command.currency,
            min_quantity=command.min_quantity,
            max_quantity=command.max_quantity,
            is_available=command.is_available if command.is_available is not None else True,
            notes=command.notes,
        )
        repo.add(price_list)

    @handle(RemovePriceListItem)
    def remove_item(self, command):
        repo, price_list = self._editable(command)
        price_list.remove_item(command.product_id)
        repo.add(price_list)

    @handle(SetVacSurcharge)
    def set_vac_surcharge(self, command):
        repo, price_list = self._editable(command)
        price_list.set_vac_surcharge(command.category_id, command.surcharge)
        repo.add(price_list)

    @handle(UpdatePriceListDetails)
    def update_details(self, command):
        repo, price_list = self._editable(command)
        price_list.reschedule(
            effective_date=command.effective_date,
            expiry_date=command.expiry_date,
            notes=command.notes,
        )
        repo.add(price_list)
