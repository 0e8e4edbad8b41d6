"""Application tests for the approval workflows spanning entities and the admin inbox."""

import pytest
from protean.utils.globals import current_domain

from wholesale import approvals
from wholesale.notification.queries import list_all, list_unread
from wholesale.order.order import Order, OrderStatus
from wholesale.price_list.price_list import PriceList, PriceListStatus
from wholesale.shared.exceptions import AuthorizationError, ConflictError


def _order_status(order_id):
    return current_domain.repository_for(Order).get(order_id).status


def _price_list_status(price_list_id):
    return current_domain.repository_for(PriceList).get(price_list_id).status


class TestOrderRequests:
    def test_placing_order_notifies_admins(self, placed_order):
        (notification,) = list_unread()
        order = current_domain.repository_for(Order).get(placed_order)
        assert notification["related_item_id"] == placed_order
        assert notification["notification_type"] == "order_pending_approval"
        assert notification["message"] == f"Order {order.order_number} from Bistro Marin is pending approval"

    def test_notifications_can_be_disabled(self, customer, supplier, ordering_setup, monkeypatch):
        monkeypatch.setenv("WHOLESALE_APPROVAL_NOTIFICATIONS", "false")
        approvals.place_order(
            customer,
            supplier.user_id,
            ordering_setup["price_list_id"],
            [{"product_id": ordering_setup["product_id"], "quantity_regular": 1}],
        )
        assert list_all() == []

    def test_notification_failure_keeps_order(self, customer, supplier, ordering_setup, monkeypatch):
        def _broken(target_ids):
            raise RuntimeError("inbox unavailable")

        monkeypatch.setattr("wholesale.notification.routing._recipients", _broken)
        order_id = approvals.place_order(
            customer,
            supplier.user_id,
            ordering_setup["price_list_id"],
            [{"product_id": ordering_setup["product_id"], "quantity_regular": 1}],
        )

        assert _order_status(order_id) == OrderStatus.PENDING_APPROVAL.value
        assert list_all() == []


class TestOrderDecisions:
    def test_cancelling_pending_approval_order_resolves_notification(self, admin, placed_order):
        assert approvals.update_order_status(admin, placed_order, "cancelled") is True

        assert _order_status(placed_order) == OrderStatus.CANCELLED.value
        assert list_unread() == []
        assert list_all()[0]["read_by"] == admin.user_id

    def test_approve(self, admin, placed_order):
        assert approvals.approve_order(admin, placed_order) is True
        assert _order_status(placed_order) == OrderStatus.PENDING.value
        assert list_unread() == []

    def test_retried_approval_is_noop(self, admin, placed_order):
        approvals.approve_order(admin, placed_order)
        assert approvals.approve_order(admin, placed_order) is False
        assert _order_status(placed_order) == OrderStatus.PENDING.value

    def test_retry_completes_unresolved_notification(self, admin, placed_order, monkeypatch):
        resolve = approvals._resolve_notifications
        monkeypatch.setattr(approvals, "_resolve_notifications", lambda actor, item_id: 0)
        approvals.approve_order(admin, placed_order)
        assert len(list_unread()) == 1

        monkeypatch.setattr(approvals, "_resolve_notifications", resolve)
        assert approvals.approve_order(admin, placed_order) is False
        assert list_unread() == []

    def test_contradicting_decision_conflicts(self, admin, placed_order):
        approvals.reject_order(admin, placed_order)
        with pytest.raises(ConflictError):
            approvals.approve_order(admin, placed_order)
        assert _order_status(placed_order) == OrderStatus.CANCELLED.value

    def test_only_admins_decide(self, supplier, placed_order):
        with pytest.raises(AuthorizationError):
            approvals.approve_order(supplier, placed_order)
        assert len(list_unread()) == 1

    def test_resolve_from_inbox(self, admin, placed_order):
        (notification,) = list_unread()
        approvals.resolve_notification(admin, notification["id"], approvals.Decision.REJECT)
        assert _order_status(placed_order) == OrderStatus.CANCELLED.value
        assert list_unread() == []


class TestPriceListDecisions:
    @pytest.fixture
    def submitted_list(self, supplier, make_price_list):
        price_list_id = make_price_list(supplier)
        approvals.submit_price_list(supplier, price_list_id)
        return price_list_id

    def test_submission_notifies_admins(self, submitted_list):
        (notification,) = list_unread()
        assert notification["notification_type"] == "price_list_pending_approval"
        assert notification["message"] == "Price list PRICES ETA MON/SUN 14-01-2024 from Fresh Fish Co is pending approval"

    def test_approve_activates_and_archives_previous(self, admin, supplier, make_price_list, submitted_list):
        previous = make_price_list(supplier, activate=True)

        assert approvals.approve_price_list(admin, submitted_list) is True

        assert _price_list_status(submitted_list) == PriceListStatus.ACTIVE.value
        assert _price_list_status(previous) == PriceListStatus.ARCHIVED.value
        assert list_unread() == []

    def test_reject_returns_to_draft(self, admin, submitted_list):
        assert approvals.reject_price_list(admin, submitted_list) is True
        assert _price_list_status(submitted_list) == PriceListStatus.DRAFT.value
        assert list_unread() == []

    def test_retried_rejection_is_noop(self, admin, submitted_list):
        approvals.reject_price_list(admin, submitted_list)
        assert approvals.reject_price_list(admin, submitted_list) is False

    def test_approving_rejected_list_conflicts(self, admin, submitted_list):
        approvals.reject_price_list(admin, submitted_list)
        with pytest.raises(ConflictError):
            approvals.approve_price_list(admin, submitted_list)
        assert _price_list_status(submitted_list) == PriceListStatus.DRAFT.value

    def test_resolve_from_inbox(self, admin, submitted_list):
        (notification,) = list_unread()
        approvals.resolve_notification(admin, notification["id"], approvals.Decision.APPROVE)
        assert _price_list_status(submitted_list) == PriceListStatus.ACTIVE.value
