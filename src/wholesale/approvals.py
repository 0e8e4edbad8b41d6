"""Approval workflows — the steps that span an entity and the admin inbox.

Each workflow runs the entity command first and touches notifications only
after it succeeded. A failure to emit a notification is logged and leaves the
order or price list in place; marking notifications read is idempotent, so a
retried decision completes whatever the first attempt left undone.
"""

import json
from enum import Enum

import structlog
from protean.utils.globals import current_domain

from wholesale.config import load_settings
from wholesale.notification.notification import ApprovalNotification, NotificationType
from wholesale.notification.routing import EmitApprovalNotification, MarkRelatedNotificationsRead
from wholesale.order.order import Order, OrderStatus
from wholesale.order.placement import PlaceOrder
from wholesale.order.status import UpdateOrderStatus
from wholesale.price_list.lifecycle import ActivatePriceList, RejectPriceList, SubmitPriceList
from wholesale.price_list.price_list import PriceList, PriceListStatus
from wholesale.shared.exceptions import ConflictError
from wholesale.shared.identity import Actor, Role, actor_fields, require_role

logger = structlog.get_logger(__name__)


class Decision(Enum):
    APPROVE = "approve"
    REJECT = "reject"


def _notify(actor: Actor, notification_type: NotificationType, related_item_id: str, message: str) -> list[str]:
    if not load_settings().approval_notifications:
        return []
    try:
        return current_domain.process(
            EmitApprovalNotification(
                notification_type=notification_type.value,
                related_item_id=related_item_id,
                message=message,
                **actor_fields(actor),
            ),
            asynchronous=False,
        )
    except Exception:
        logger.exception(
            "Approval notification failed",
            notification_type=notification_type.value,
            related_item_id=related_item_id,
        )
        return []


def _resolve_notifications(actor: Actor, related_item_id: str) -> int:
    return current_domain.process(
        MarkRelatedNotificationsRead(related_item_id=related_item_id, **actor_fields(actor)),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
def place_order(
    actor: Actor,
    supplier_id: str,
    price_list_id: str,
    items: list[dict],
    requested_delivery_date=None,
    customer_notes: str | None = None,
) -> str:
    """Place an order and alert the admins. Returns the new order id."""
    order_id = current_domain.process(
        PlaceOrder(
            supplier_id=supplier_id,
            price_list_id=price_list_id,
            items=json.dumps(items),
            requested_delivery_date=requested_delivery_date,
            customer_notes=customer_notes,
            **actor_fields(actor),
        ),
        asynchronous=False,
    )
    order = current_domain.repository_for(Order).get(order_id)
    _notify(
        actor,
        NotificationType.ORDER_PENDING_APPROVAL,
        order_id,
        f"Order {order.order_number} from {actor.display_name} is pending approval",
    )
    return order_id


def submit_price_list(actor: Actor, price_list_id: str) -> None:
    """Ask the admins to approve a draft price list."""
    current_domain.process(SubmitPriceList(price_list_id=price_list_id, **actor_fields(actor)), asynchronous=False)
    price_list = current_domain.repository_for(PriceList).get(price_list_id)
    _notify(
        actor,
        NotificationType.PRICE_LIST_PENDING_APPROVAL,
        price_list_id,
        f"Price list {price_list.name} from {price_list.supplier_name} is pending approval",
    )


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------
def update_order_status(actor: Actor, order_id: str, new_status: str) -> bool:
    """Change an order's status; leaving the approval gate resolves its notifications."""
    previous = current_domain.repository_for(Order).get(order_id).status
    changed = current_domain.process(
        UpdateOrderStatus(order_id=order_id, new_status=new_status, **actor_fields(actor)),
        asynchronous=False,
    )
    if previous == OrderStatus.PENDING_APPROVAL.value:
        _resolve_notifications(actor, order_id)
    return changed


def _decide_order(actor: Actor, order_id: str, decision: Decision) -> bool:
    order = current_domain.repository_for(Order).get(order_id)
    if order.status == OrderStatus.PENDING_APPROVAL.value:
        target = OrderStatus.PENDING if decision == Decision.APPROVE else OrderStatus.CANCELLED
        return update_order_status(actor, order_id, target.value)

    # Already past the gate: repeat decisions only settle the inbox
    was_approved = order.approved_at is not None
    _resolve_notifications(actor, order_id)
    if was_approved != (decision == Decision.APPROVE):
        raise ConflictError(f"Order {order.order_number} was already {'approved' if was_approved else 'rejected'}")
    return False


def _decide_price_list(actor: Actor, price_list_id: str, decision: Decision) -> bool:
    price_list = current_domain.repository_for(PriceList).get(price_list_id)
    status = PriceListStatus(price_list.status)
    if status == PriceListStatus.PENDING_APPROVAL:
        command_cls = ActivatePriceList if decision == Decision.APPROVE else RejectPriceList
        changed = current_domain.process(
            command_cls(price_list_id=price_list_id, **actor_fields(actor)), asynchronous=False
        )
        _resolve_notifications(actor, price_list_id)
        return changed

    was_approved = status in (PriceListStatus.ACTIVE, PriceListStatus.ARCHIVED)
    _resolve_notifications(actor, price_list_id)
    if was_approved != (decision == Decision.APPROVE):
        raise ConflictError(f"Price list {price_list.name} was already {'approved' if was_approved else 'returned'}")
    return False


def approve_order(actor: Actor, order_id: str) -> bool:
    require_role(actor, Role.ADMIN)
    return _decide_order(actor, order_id, Decision.APPROVE)


def reject_order(actor: Actor, order_id: str) -> bool:
    require_role(actor, Role.ADMIN)
    return _decide_order(actor, order_id, Decision.REJECT)


def approve_price_list(actor: Actor, price_list_id: str) -> bool:
    require_role(actor, Role.ADMIN)
    return _decide_price_list(actor, price_list_id, Decision.APPROVE)


def reject_price_list(actor: Actor, price_list_id: str) -> bool:
    require_role(actor, Role.ADMIN)
    return _decide_price_list(actor, price_list_id, Decision.REJECT)


def resolve_notification(actor: Actor, notification_id: str, decision: Decision) -> bool:
    """Apply an admin decision taken from an inbox entry."""
    require_role(actor, Role.ADMIN)
    notification = current_domain.repository_for(ApprovalNotification).get(notification_id)
    if notification.notification_type == NotificationType.ORDER_PENDING_APPROVAL.value:
        return _decide_order(actor, notification.related_item_id, decision)
    return _decide_price_list(actor, notification.related_item_id, decision)
