"""Order aggregate (CQRS) — a customer's purchase from one supplier.

State Machine (7 states):
    PENDING_APPROVAL → PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    PENDING_APPROVAL → CANCELLED                          (rejected by an admin)
    PENDING/CONFIRMED/PROCESSING/SHIPPED → CANCELLED
DELIVERED and CANCELLED are terminal.

Orders awaiting approval are invisible to suppliers. Once an admin has
decided, the supplier sees the order, including one rejected as CANCELLED.
Order lines are price snapshots and never change after placement.
"""

import random
from datetime import UTC, date, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Float, HasMany, Identifier, String

from wholesale.domain import wholesale
from wholesale.order.events import (
    OrderApproved,
    OrderNoteAdded,
    OrderPlaced,
    OrderRejected,
    OrderStatusChanged,
)
from wholesale.order.pricing import order_total
from wholesale.shared.exceptions import InvalidTransitionError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING_APPROVAL = "pending_approval"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class NoteType(Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    ADMIN = "admin"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING_APPROVAL: {OrderStatus.PENDING, OrderStatus.CANCELLED},
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

SUPPLIER_ACTIVE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING}
SUPPLIER_HISTORY_STATES = {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def generate_order_number(on: date | None = None) -> str:
    """``ORD-YYYYMMDD-NNN`` with a random three-digit suffix."""
    on = on or datetime.now(UTC).date()
    return f"ORD-{on.strftime('%Y%m%d')}-{random.randint(0, 999):03d}"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@wholesale.entity(part_of="Order")
class OrderItem:
    """Price snapshot of one ordered product. Written once, at placement."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    category_id = Identifier(required=True)
    category_name = String(max_length=255)
    quantity_regular = Float(default=0.0, min_value=0.0)
    quantity_vac = Float(default=0.0, min_value=0.0)
    unit_price = Float(required=True, min_value=0.0)
    vac_surcharge_at_order = Float()
    total = Float(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@wholesale.aggregate
class Order:
    order_number = String(required=True, max_length=32)
    customer_id = Identifier(required=True)
    customer_name = String(max_length=255)
    supplier_id = Identifier(required=True)
    supplier_name = String(max_length=255)
    price_list_id = Identifier(required=True)
    price_list_name = String(max_length=255)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING_APPROVAL.value)
    order_date = DateTime(required=True)
    delivery_start_date = Date()
    delivery_end_date = Date()
    requested_delivery_date = Date()
    items = HasMany(OrderItem)
    total_amount = Float(default=0.0)
    currency = String(max_length=3)
    customer_notes = String(max_length=2000)
    supplier_notes = String(max_length=2000)
    admin_notes = String(max_length=2000)
    approved_at = DateTime()
    cancelled_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_id,
        supplier_id,
        price_list,
        lines,
        customer_name=None,
        requested_delivery_date=None,
        customer_notes=None,
    ):
        """Create an order awaiting approval from priced lines.

        Args:
            price_list: The supplier's active ``PriceList``; the delivery
                window, name and currency are copied from it.
            lines: ``PricedLine`` values from ``snapshot_lines``.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one line"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            customer_name=customer_name,
            supplier_id=supplier_id,
            supplier_name=price_list.supplier_name,
            price_list_id=str(price_list.id),
            price_list_name=price_list.name,
            status=OrderStatus.PENDING_APPROVAL.value,
            order_date=now,
            delivery_start_date=price_list.effective_date,
            delivery_end_date=price_list.expiry_date,
            requested_delivery_date=requested_delivery_date,
            total_amount=order_total(lines),
            currency=price_list.currency,
            customer_notes=customer_notes,
            updated_at=now,
        )
        for line in lines:
            order.add_items(OrderItem(**line.as_dict()))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                customer_name=customer_name,
                supplier_id=str(supplier_id),
                price_list_id=str(price_list.id),
                item_count=len(lines),
                total_amount=order.total_amount,
                currency=order.currency,
                delivery_start_date=order.delivery_start_date,
                delivery_end_date=order.delivery_end_date,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------
    @property
    def visible_to_supplier(self) -> bool:
        return self.status != OrderStatus.PENDING_APPROVAL.value

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError("order", current.value, target_status.value)

    def transition_to(self, target_status, changed_by):
        """Move to ``target_status``. Returns False when the order is already there."""
        current = OrderStatus(self.status)
        if current == target_status:
            return False
        self.assert_can_transition(target_status)

        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now

        if current == OrderStatus.PENDING_APPROVAL and target_status == OrderStatus.PENDING:
            self.approved_at = now
            self.raise_(
                OrderApproved(
                    order_id=str(self.id),
                    supplier_id=str(self.supplier_id),
                    approved_by=str(changed_by),
                    approved_at=now,
                )
            )
        elif target_status == OrderStatus.CANCELLED:
            self.cancelled_at = now
            if current == OrderStatus.PENDING_APPROVAL:
                self.raise_(
                    OrderRejected(
                        order_id=str(self.id),
                        customer_id=str(self.customer_id),
                        rejected_by=str(changed_by),
                        rejected_at=now,
                    )
                )

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target_status.value,
                changed_by=str(changed_by),
                changed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------
    def add_note(self, note_type, text, added_by):
        if not text or not text.strip():
            raise ValidationError({"note": ["Note cannot be empty"]})

        setattr(self, f"{note_type.value}_notes", text.strip())
        self.updated_at = datetime.now(UTC)
        self.raise_(OrderNoteAdded(order_id=str(self.id), note_type=note_type.value, added_by=str(added_by)))
