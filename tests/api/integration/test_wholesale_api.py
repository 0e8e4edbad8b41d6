"""Integration tests for the Wholesale HTTP endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.utils.globals import current_domain

from wholesale.api import (
    association_router,
    catalogue_router,
    notification_router,
    order_router,
    price_list_router,
)
from wholesale.api.errors import register_error_handlers
from wholesale.order.order import Order

ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "admin", "X-User-Name": "Ada Admin"}
SUPPLIER = {"X-User-Id": "sup-001", "X-User-Role": "supplier", "X-User-Name": "Fresh Fish Co"}
CUSTOMER = {"X-User-Id": "cust-001", "X-User-Role": "customer", "X-User-Name": "Bistro Marin"}


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(catalogue_router)
    app.include_router(price_list_router)
    app.include_router(association_router)
    app.include_router(order_router)
    app.include_router(notification_router)
    return TestClient(app)


@pytest.fixture()
def catalogue(client):
    category = client.post(
        "/categories",
        json={"supplier_id": "sup-001", "name": "Whole Fish", "enable_vac_pricing": True},
        headers=SUPPLIER,
    )
    assert category.status_code == 201
    category_id = category.json()["id"]
    product = client.post(
        "/products",
        json={"supplier_id": "sup-001", "category_id": category_id, "name": "Sea Bream"},
        headers=SUPPLIER,
    )
    assert product.status_code == 201
    return {"category_id": category_id, "product_id": product.json()["id"]}


@pytest.fixture()
def active_list(client, catalogue):
    response = client.post(
        "/price-lists",
        json={
            "supplier_id": "sup-001",
            "supplier_name": "Fresh Fish Co",
            "effective_date": "2024-01-08",
            "expiry_date": "2024-01-14",
        },
        headers=SUPPLIER,
    )
    assert response.status_code == 201
    price_list_id = response.json()["id"]
    client.put(
        f"/price-lists/{price_list_id}/items/{catalogue['product_id']}", json={"price_box": 10.0}, headers=SUPPLIER
    )
    client.put(
        f"/price-lists/{price_list_id}/surcharges/{catalogue['category_id']}", json={"surcharge": 1.5}, headers=SUPPLIER
    )
    activated = client.post(f"/price-lists/{price_list_id}/activate", headers=SUPPLIER)
    assert activated.json() == {"changed": True}
    return price_list_id


@pytest.fixture()
def order_id(client, catalogue, active_list):
    client.post("/associations", json={"customer_id": "cust-001", "supplier_id": "sup-001"}, headers=ADMIN)
    response = client.post(
        "/orders",
        json={
            "supplier_id": "sup-001",
            "price_list_id": active_list,
            "items": [{"product_id": catalogue["product_id"], "quantity_regular": 3, "quantity_vac": 2}],
        },
        headers=CUSTOMER,
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestIdentityHeaders:
    def test_missing_headers_rejected(self, client):
        assert client.get("/price-lists/supplier/sup-001").status_code == 422

    def test_unknown_role_forbidden(self, client):
        response = client.get("/price-lists/supplier/sup-001", headers={"X-User-Id": "u1", "X-User-Role": "guest"})
        assert response.status_code == 403
        assert response.json()["kind"] == "authorization"

    def test_portal_mismatch_forbidden(self, client):
        response = client.get("/price-lists/supplier/sup-001", headers={**CUSTOMER, "X-Portal": "supplier"})
        assert response.status_code == 403


class TestPriceListEndpoints:
    def test_read_active_list_with_items(self, client, catalogue, active_list):
        response = client.get("/price-lists/supplier/sup-001/active", headers=CUSTOMER)
        assert response.status_code == 200
        assert response.json()["id"] == active_list

        detail = client.get(f"/price-lists/{active_list}", headers=CUSTOMER).json()
        assert detail["name"] == "PRICES ETA MON/SUN 14-01-2024"
        assert detail["items"][0]["product_name"] == "Sea Bream"

    def test_no_active_list_is_not_found(self, client):
        response = client.get("/price-lists/supplier/sup-404/active", headers=ADMIN)
        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    def test_invalid_window_is_validation_error(self, client):
        response = client.post(
            "/price-lists",
            json={
                "supplier_id": "sup-001",
                "supplier_name": "Fresh Fish Co",
                "effective_date": "2024-01-14",
                "expiry_date": "2024-01-08",
            },
            headers=SUPPLIER,
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "validation"

    def test_deleting_active_list_conflicts(self, client, active_list):
        response = client.delete(f"/price-lists/{active_list}", headers=SUPPLIER)
        assert response.status_code == 409
        assert response.json()["kind"] == "conflict"

    def test_admin_activating_pending_list_clears_inbox(self, client):
        created = client.post(
            "/price-lists",
            json={
                "supplier_id": "sup-001",
                "supplier_name": "Fresh Fish Co",
                "effective_date": "2024-01-08",
                "expiry_date": "2024-01-14",
                "currency": "sek",
            },
            headers=SUPPLIER,
        )
        price_list_id = created.json()["id"]
        assert client.post(f"/price-lists/{price_list_id}/submit", headers=SUPPLIER).status_code == 200
        assert len(client.get("/notifications", headers=ADMIN).json()) == 1

        response = client.post(f"/price-lists/{price_list_id}/activate", headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["changed"] is True

        assert client.get("/notifications", headers=ADMIN).json() == []
        active = client.get("/price-lists/supplier/sup-001/active", headers=SUPPLIER).json()
        assert active["id"] == price_list_id
        assert active["currency"] == "SEK"

    def test_activating_unknown_list_is_not_found(self, client):
        response = client.post("/price-lists/does-not-exist/activate", headers=ADMIN)
        assert response.status_code == 404


class TestAssociationEndpoints:
    def test_assign_reports_summary(self, client):
        client.post("/associations", json={"customer_id": "cust-001", "supplier_id": "s1"}, headers=ADMIN)
        response = client.post(
            "/associations/assign",
            json={"customer_id": "cust-001", "suppliers": [{"supplier_id": "s1"}, {"supplier_id": "s2"}]},
            headers=ADMIN,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["created"] == ["s2"]
        assert body["skipped"] == ["s1"]
        assert body["summary"] == "1 created, 1 already existed"

    def test_customer_cannot_view_others(self, client):
        assert client.get("/associations/customers/cust-002", headers=CUSTOMER).status_code == 403

    def test_only_admin_lists_everything(self, client):
        assert client.get("/associations", headers=SUPPLIER).status_code == 403
        assert client.get("/associations", headers=ADMIN).json() == []


class TestOrderEndpoints:
    def test_placed_order_snapshot(self, client, order_id):
        order = client.get(f"/orders/{order_id}", headers=CUSTOMER).json()
        assert order["status"] == "pending_approval"
        assert order["total_amount"] == 30.0
        assert order["items"][0]["vac_surcharge_at_order"] == 1.5

    def test_supplier_blind_until_approved(self, client, order_id):
        assert client.get(f"/orders/{order_id}", headers=SUPPLIER).status_code == 404
        assert client.get("/orders", headers=SUPPLIER).json() == []

        approved = client.post(f"/orders/{order_id}/approve", headers=ADMIN)
        assert approved.json() == {"changed": True}

        assert client.get(f"/orders/{order_id}", headers=SUPPLIER).status_code == 200
        assert [o["id"] for o in client.get("/orders?view=active", headers=SUPPLIER).json()] == [order_id]

    def test_cancel_from_approval_resolves_inbox(self, client, order_id):
        assert len(client.get("/notifications", headers=ADMIN).json()) == 1

        response = client.put(f"/orders/{order_id}/status", json={"status": "cancelled"}, headers=ADMIN)
        assert response.status_code == 200

        assert client.get("/notifications", headers=ADMIN).json() == []
        assert current_domain.repository_for(Order).get(order_id).status == "cancelled"

    def test_illegal_transition_is_conflict(self, client, order_id):
        client.post(f"/orders/{order_id}/approve", headers=ADMIN)
        for status in ("confirmed", "processing", "shipped", "delivered"):
            client.put(f"/orders/{order_id}/status", json={"status": status}, headers=SUPPLIER)

        response = client.put(f"/orders/{order_id}/status", json={"status": "pending"}, headers=SUPPLIER)
        assert response.status_code == 409
        assert response.json()["current"] == "delivered"
        assert response.json()["target"] == "pending"

    def test_supplier_cannot_approve(self, client, order_id):
        assert client.post(f"/orders/{order_id}/approve", headers=SUPPLIER).status_code == 403

    def test_stats_admin_only(self, client, order_id):
        assert client.get("/orders/stats", headers=SUPPLIER).status_code == 403
        assert client.get("/orders/stats", headers=ADMIN).json()["pending_approval_orders"] == 1


class TestNotificationEndpoints:
    def test_approve_from_inbox(self, client, order_id):
        (notification,) = client.get("/notifications", headers=ADMIN).json()
        response = client.post(f"/notifications/{notification['id']}/approve", headers=ADMIN)
        assert response.json() == {"changed": True}
        assert current_domain.repository_for(Order).get(order_id).status == "pending"
        assert len(client.get("/notifications?unread=false", headers=ADMIN).json()) == 1
