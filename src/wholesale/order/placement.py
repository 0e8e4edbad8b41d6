"""Order placement — command and handler.

The customer sends product ids and quantities only. Unit prices come from
the supplier's active price list and the category surcharges are frozen into
the order lines as they stand at this moment.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Date, Identifier, String, Text
from protean.utils.globals import current_domain

from wholesale.association.association import CustomerSupplierAssociation
from wholesale.catalogue.queries import product_catalogue
from wholesale.config import load_settings
from wholesale.domain import wholesale
from wholesale.order.order import Order, generate_order_number
from wholesale.order.pricing import line_quantity, snapshot_lines
from wholesale.price_list.price_list import PriceList, PriceListStatus
from wholesale.shared.exceptions import AuthorizationError, ConflictError
from wholesale.shared.identity import Role, actor_from, require_role

logger = structlog.get_logger(__name__)


@wholesale.command(part_of="Order")
class PlaceOrder:
    supplier_id: Identifier(required=True)
    price_list_id: Identifier(required=True)
    items: Text(required=True)  # JSON: list of {"product_id", "quantity_regular", "quantity_vac"}
    requested_delivery_date: Date()
    customer_notes: String(max_length=2000)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


def _cart_from(raw_items, price_list):
    """Build the priced cart from requested quantities and the list's items."""
    requested = json.loads(raw_items) if isinstance(raw_items, str) else raw_items
    if not requested:
        raise ValidationError({"items": ["An order needs at least one line"]})

    cart = {}
    for line in requested:
        product_id = str(line.get("product_id") or "")
        if not product_id:
            raise ValidationError({"items": ["Every line needs a product_id"]})
        if product_id in cart:
            raise ValidationError({"items": [f"Product {product_id} appears more than once"]})

        item = price_list.item_for(product_id)
        if item is None:
            raise ValidationError({"items": [f"Product {product_id} is not on price list {price_list.name}"]})
        if not item.is_available:
            raise ValidationError({"items": [f"Product {product_id} is currently unavailable"]})

        quantity_regular = line_quantity(line, "quantity_regular", product_id)
        quantity_vac = line_quantity(line, "quantity_vac", product_id)
        ordered = quantity_regular + quantity_vac
        if item.min_quantity is not None and 0 < ordered < item.min_quantity:
            raise ValidationError({"items": [f"Product {product_id} must be ordered in at least {item.min_quantity}"]})
        if item.max_quantity is not None and ordered > item.max_quantity:
            raise ValidationError({"items": [f"Product {product_id} is limited to {item.max_quantity} per order"]})

        cart[product_id] = {
            "quantity_regular": quantity_regular,
            "quantity_vac": quantity_vac,
            "unit_price": item.price_box,
        }
    return cart


def _unique_order_number(repo, attempts):
    for _ in range(max(attempts, 1)):
        candidate = generate_order_number()
        if not repo.with_number(candidate):
            return candidate
        logger.warning("Order number collision", order_number=candidate)
    raise ConflictError("Could not allocate a unique order number; please retry")


@wholesale.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        actor = actor_from(command)
        require_role(actor, Role.CUSTOMER)

        association = current_domain.repository_for(CustomerSupplierAssociation).for_pair(
            actor.user_id, command.supplier_id
        )
        if association is None or not association.is_active:
            raise AuthorizationError(f"Customer {actor.user_id} is not associated with supplier {command.supplier_id}")

        price_list = current_domain.repository_for(PriceList).get(command.price_list_id)
        if str(price_list.supplier_id) != str(command.supplier_id):
            raise ValidationError({"price_list_id": ["Price list belongs to another supplier"]})
        if PriceListStatus(price_list.status) != PriceListStatus.ACTIVE:
            raise ConflictError(f"Price list {price_list.name} is no longer active")

        cart = _cart_from(command.items, price_list)
        lines = snapshot_lines(cart, price_list.surcharge_map(), product_catalogue(cart.keys()))

        settings = load_settings()
        repo = current_domain.repository_for(Order)
        order = Order.place(
            order_number=_unique_order_number(repo, settings.order_number_attempts),
            customer_id=actor.user_id,
            customer_name=actor.name or None,
            supplier_id=command.supplier_id,
            price_list=price_list,
            lines=lines,
            requested_delivery_date=command.requested_delivery_date,
            customer_notes=command.customer_notes,
        )
        repo.add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=actor.user_id,
            supplier_id=str(command.supplier_id),
            total_amount=order.total_amount,
        )
        return str(order.id)
