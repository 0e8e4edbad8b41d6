"""Order status changes and notes.

Approval is ``pending_approval → pending`` and rejection is
``pending_approval → cancelled``; both are admin decisions. Every later
transition belongs to the order's supplier (admins may also act). The
transition is checked against the stored order before the actor's rights, so
an impossible move is reported as a conflict whoever asks for it.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from wholesale.domain import wholesale
from wholesale.order.order import NoteType, Order, OrderStatus
from wholesale.shared.exceptions import AuthorizationError
from wholesale.shared.identity import Role, actor_from, require_role, require_supplier_or_admin

logger = structlog.get_logger(__name__)


@wholesale.command(part_of="Order")
class UpdateOrderStatus:
    order_id: Identifier(required=True)
    new_status: String(required=True, max_length=32)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


@wholesale.command(part_of="Order")
class AddOrderNote:
    order_id: Identifier(required=True)
    note_type: String(required=True, max_length=16)
    text: Text(required=True)
    actor_id: Identifier(required=True)
    actor_role: String(required=True)
    actor_name: String()


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({"new_status": [f"Unknown order status: {value}"]}) from None


def _authorize_status_change(actor, order):
    if OrderStatus(order.status) == OrderStatus.PENDING_APPROVAL:
        require_role(actor, Role.ADMIN)
        return
    require_supplier_or_admin(actor, order.supplier_id)
    if not actor.is_admin and not order.visible_to_supplier:
        raise ObjectNotFoundError(f"Order {order.id} not found")


def _authorize_note(actor, order, note_type):
    if note_type == NoteType.ADMIN:
        require_role(actor, Role.ADMIN)
    elif note_type == NoteType.SUPPLIER:
        require_supplier_or_admin(actor, order.supplier_id)
        if not actor.is_admin and not order.visible_to_supplier:
            raise ObjectNotFoundError(f"Order {order.id} not found")
    elif actor.is_admin:
        return
    else:
        require_role(actor, Role.CUSTOMER)
        if str(actor.user_id) != str(order.customer_id):
            raise AuthorizationError(f"Customer {actor.user_id} does not own order {order.order_number}")


@wholesale.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        """Apply a status change. Returns False when the order already had that status."""
        target = parse_status(command.new_status)
        actor = actor_from(command)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status
        if OrderStatus(previous) != target:
            order.assert_can_transition(target)
        _authorize_status_change(actor, order)

        changed = order.transition_to(target, actor.user_id)
        if changed:
            repo.add(order)
            logger.info(
                "Order status changed",
                order_id=str(order.id),
                order_number=order.order_number,
                previous_status=previous,
                new_status=target.value,
                actor_id=actor.user_id,
            )
        return changed

    @handle(AddOrderNote)
    def add_note(self, command):
        try:
            note_type = NoteType(command.note_type)
        except ValueError:
            raise ValidationError({"note_type": [f"Unknown note type: {command.note_type}"]}) from None
        actor = actor_from(command)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        _authorize_note(actor, order, note_type)

        order.add_note(note_type, command.text, actor.user_id)
        repo.add(order)
