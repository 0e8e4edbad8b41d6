"""Tests for the Order aggregate: placement, state machine and notes."""

import re
from datetime import date

import pytest
from protean.exceptions import ValidationError

from wholesale.catalogue.queries import CatalogueEntry
from wholesale.order.events import OrderApproved, OrderPlaced, OrderRejected, OrderStatusChanged
from wholesale.order.order import NoteType, Order, OrderStatus, generate_order_number
from wholesale.order.pricing import snapshot_lines
from wholesale.price_list.price_list import PriceList
from wholesale.shared.exceptions import InvalidTransitionError

CATALOGUE = {"bream": CatalogueEntry("bream", "Sea Bream", "whole-fish", "Whole Fish", vac_enabled=True)}


def _price_list():
    return PriceList.create(
        supplier_id="sup-001",
        supplier_name="Fresh Fish Co",
        effective_date=date(2024, 1, 8),
        expiry_date=date(2024, 1, 14),
        created_by="sup-001",
        currency="SEK",
    )


def _order(quantity_regular=3, quantity_vac=2):
    lines = snapshot_lines(
        {"bream": {"quantity_regular": quantity_regular, "quantity_vac": quantity_vac, "unit_price": 10.0}},
        {"whole-fish": 1.5},
        CATALOGUE,
    )
    return Order.place(
        order_number="ORD-20240108-001",
        customer_id="cust-001",
        supplier_id="sup-001",
        price_list=_price_list(),
        lines=lines,
        customer_name="Bistro Marin",
    )


def _advance(order, *statuses):
    for status in statuses:
        order.transition_to(status, "admin-001")


class TestOrderNumber:
    def test_format(self):
        assert re.fullmatch(r"ORD-20240108-\d{3}", generate_order_number(date(2024, 1, 8)))


class TestPlacement:
    def test_placed_awaiting_approval(self):
        order = _order()
        assert order.status == OrderStatus.PENDING_APPROVAL.value
        assert order.approved_at is None
        assert order.visible_to_supplier is False

    def test_copies_price_list_window(self):
        order = _order()
        assert order.delivery_start_date == date(2024, 1, 8)
        assert order.delivery_end_date == date(2024, 1, 14)
        assert order.price_list_name == "PRICES ETA MON/SUN 14-01-2024"
        assert order.supplier_name == "Fresh Fish Co"

    def test_priced_in_price_list_currency(self):
        assert _order().currency == "SEK"

    def test_snapshot_lines_and_total(self):
        order = _order()
        (item,) = order.items
        assert item.total == 30.0
        assert item.vac_surcharge_at_order == 1.5
        assert order.total_amount == 30.0

    def test_raises_placed_event(self):
        event = _order()._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.item_count == 1

    def test_requires_lines(self):
        with pytest.raises(ValidationError):
            Order.place(
                order_number="ORD-20240108-001",
                customer_id="cust-001",
                supplier_id="sup-001",
                price_list=_price_list(),
                lines=(),
            )


class TestTransitions:
    def test_approval_sets_approved_at(self):
        order = _order()
        assert order.transition_to(OrderStatus.PENDING, "admin-001") is True
        assert order.approved_at is not None
        assert order.visible_to_supplier is True
        assert any(isinstance(e, OrderApproved) for e in order._events)

    def test_rejected_order_reaches_supplier_as_cancelled(self):
        order = _order()
        order.transition_to(OrderStatus.CANCELLED, "admin-001")
        assert order.cancelled_at is not None
        assert order.visible_to_supplier is True
        assert any(isinstance(e, OrderRejected) for e in order._events)

    def test_full_happy_path(self):
        order = _order()
        _advance(
            order,
            OrderStatus.PENDING,
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
        )
        assert order.status == OrderStatus.DELIVERED.value
        changes = [e for e in order._events if isinstance(e, OrderStatusChanged)]
        assert [e.new_status for e in changes] == ["pending", "confirmed", "processing", "shipped", "delivered"]

    def test_same_status_is_noop(self):
        order = _order()
        event_count = len(order._events)
        assert order.transition_to(OrderStatus.PENDING_APPROVAL, "admin-001") is False
        assert len(order._events) == event_count

    def test_delivered_is_terminal(self):
        order = _order()
        _advance(
            order,
            OrderStatus.PENDING,
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
        )
        with pytest.raises(InvalidTransitionError) as exc:
            order.transition_to(OrderStatus.PENDING, "sup-001")
        assert exc.value.current == "delivered"
        assert order.status == OrderStatus.DELIVERED.value

    def test_cannot_skip_states(self):
        order = _order()
        with pytest.raises(InvalidTransitionError):
            order.transition_to(OrderStatus.SHIPPED, "admin-001")

    def test_cancel_after_shipping(self):
        order = _order()
        _advance(order, OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED)
        order.transition_to(OrderStatus.CANCELLED, "sup-001")
        assert order.status == OrderStatus.CANCELLED.value
        assert order.visible_to_supplier is True


class TestNotes:
    def test_add_supplier_note(self):
        order = _order()
        order.add_note(NoteType.SUPPLIER, "  Delivery after 6am  ", "sup-001")
        assert order.supplier_notes == "Delivery after 6am"

    def test_empty_note_rejected(self):
        with pytest.raises(ValidationError):
            _order().add_note(NoteType.ADMIN, "   ", "admin-001")
