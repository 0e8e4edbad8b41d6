"""Read accessors for orders.

Accessors serving a supplier drop the orders still awaiting admin approval.
Customer and admin accessors return everything they own or ask for.
"""

from datetime import UTC, date, datetime, time, timedelta

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from wholesale.order.order import SUPPLIER_ACTIVE_STATES, SUPPLIER_HISTORY_STATES, Order, OrderStatus
from wholesale.order.status import parse_status


def _repo():
    return current_domain.repository_for(Order)


def order_view(order) -> dict:
    """A detached copy of the order, safe to hand to renderers."""
    return order.to_dict()


def get_order(order_id):
    return order_view(_repo().get(order_id))


def get_order_for_supplier(order_id, supplier_id):
    order = _repo().get(order_id)
    if str(order.supplier_id) != str(supplier_id) or not order.visible_to_supplier:
        raise ObjectNotFoundError(f"Order {order_id} not found")
    return order_view(order)


def get_by_customer(customer_id):
    return [order_view(o) for o in _repo().for_customer(customer_id)]


def get_by_supplier(supplier_id):
    return [order_view(o) for o in _repo().for_supplier(supplier_id) if o.visible_to_supplier]


def _supplier_orders_in(supplier_id, states):
    allowed = {state.value for state in states}
    return [
        order_view(o) for o in _repo().for_supplier(supplier_id) if o.visible_to_supplier and o.status in allowed
    ]


def supplier_active_orders(supplier_id):
    return _supplier_orders_in(supplier_id, SUPPLIER_ACTIVE_STATES)


def supplier_order_history(supplier_id):
    return _supplier_orders_in(supplier_id, SUPPLIER_HISTORY_STATES)


def get_all():
    return [order_view(o) for o in _repo().everything()]


def get_by_status(status):
    return [order_view(o) for o in _repo().with_status(parse_status(status).value)]


def get_pending_approval():
    return get_by_status(OrderStatus.PENDING_APPROVAL.value)


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)).date()


def get_by_date_range(start, end):
    """Orders placed between ``start`` and ``end`` inclusive."""
    start = datetime.combine(_as_date(start), time.min, tzinfo=UTC)
    end = datetime.combine(_as_date(end) + timedelta(days=1), time.min, tzinfo=UTC)
    return [order_view(o) for o in _repo().placed_between(start, end)]


def order_stats(orders=None) -> dict:
    """Dashboard counters over the given order views (all orders by default)."""
    orders = get_all() if orders is None else orders
    total_orders = len(orders)
    total_revenue = round(sum(o["total_amount"] or 0.0 for o in orders), 2)
    return {
        "total_orders": total_orders,
        "pending_approval_orders": sum(1 for o in orders if o["status"] == OrderStatus.PENDING_APPROVAL.value),
        "pending_orders": sum(1 for o in orders if o["status"] == OrderStatus.PENDING.value),
        "confirmed_orders": sum(1 for o in orders if o["status"] == OrderStatus.CONFIRMED.value),
        "total_revenue": total_revenue,
        "average_order_value": round(total_revenue / total_orders, 2) if total_orders else 0.0,
    }
