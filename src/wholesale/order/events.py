"""Domain events for the Order aggregate."""

from protean.fields import Date, DateTime, Float, Identifier, Integer, String

from wholesale.domain import wholesale


@wholesale.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order; it awaits admin approval."""

    __version__ = 1

    order_id: Identifier(required=True)
    order_number: String(required=True)
    customer_id: Identifier(required=True)
    customer_name: String()
    supplier_id: Identifier(required=True)
    price_list_id: Identifier(required=True)
    item_count: Integer(required=True)
    total_amount: Float(required=True)
    currency: String(max_length=3)
    delivery_start_date: Date()
    delivery_end_date: Date()
    placed_at: DateTime(required=True)


@wholesale.event(part_of="Order")
class OrderApproved:
    """An admin released the order to its supplier."""

    __version__ = 1

    order_id: Identifier(required=True)
    supplier_id: Identifier(required=True)
    approved_by: Identifier(required=True)
    approved_at: DateTime(required=True)


@wholesale.event(part_of="Order")
class OrderRejected:
    """An admin refused the order at the approval gate."""

    __version__ = 1

    order_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    rejected_by: Identifier(required=True)
    rejected_at: DateTime(required=True)


@wholesale.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_by: Identifier(required=True)
    changed_at: DateTime(required=True)


@wholesale.event(part_of="Order")
class OrderNoteAdded:
    __version__ = 1

    order_id: Identifier(required=True)
    note_type: String(required=True)
    added_by: Identifier(required=True)
