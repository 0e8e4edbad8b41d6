"""Price list load test scenarios.

A supplier submits a week's prices for approval, an admin approves them from
the inbox, and the supplier rolls the list forward by duplicating it. Every
approval archives the previous week's list.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    business_name,
    category_data,
    delivery_window,
    identity_headers,
    price_item_data,
    price_list_data,
    product_data,
    user_id,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import PriceListState


class PriceListApprovalJourney(SequentialTaskSet):
    """Create -> Price -> Submit -> Approve from Inbox -> Duplicate -> Submit -> Approve.

    Generates events: PriceListCreated (x2), PriceListItemSet, PriceListSubmitted (x2),
    ApprovalRequested (x2), PriceListActivated (x2), PriceListArchived, NotificationRead (x2).
    """

    def on_start(self):
        self.state = PriceListState(
            admin_id=user_id("admin"),
            supplier_id=user_id("supplier"),
            supplier_name=business_name(),
        )
        self.admin = identity_headers(self.state.admin_id, "admin", "Load Admin")
        self.supplier = identity_headers(self.state.supplier_id, "supplier", self.state.supplier_name)

    @task
    def create_priced_draft(self):
        category = self.client.post(
            "/categories", json=category_data(self.state.supplier_id), headers=self.supplier, name="POST /categories"
        )
        product = self.client.post(
            "/products",
            json=product_data(self.state.supplier_id, category.json().get("id")),
            headers=self.supplier,
            name="POST /products",
        )
        with self.client.post(
            "/price-lists",
            json=price_list_data(self.state.supplier_id, self.state.supplier_name, self.state.weeks_ahead),
            headers=self.supplier,
            catch_response=True,
            name="POST /price-lists",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Create price list failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
            self.state.price_list_ids.append(resp.json()["id"])

        self.client.put(
            f"/price-lists/{self.state.price_list_ids[-1]}/items/{product.json().get('id')}",
            json=price_item_data(),
            headers=self.supplier,
            name="PUT /price-lists/{id}/items/{product_id}",
        )

    def _submit_and_approve(self):
        price_list_id = self.state.price_list_ids[-1]
        self.client.post(
            f"/price-lists/{price_list_id}/submit", headers=self.supplier, name="POST /price-lists/{id}/submit"
        )

        inbox = self.client.get("/notifications", headers=self.admin, name="GET /notifications").json()
        notification = next((n for n in inbox if n["related_item_id"] == price_list_id), None)
        if notification is None:
            # Approve directly when the inbox entry is missing
            url, name = f"/price-lists/{price_list_id}/approve", "POST /price-lists/{id}/approve"
        else:
            url, name = f"/notifications/{notification['id']}/approve", "POST /notifications/{id}/approve"

        with self.client.post(url, headers=self.admin, catch_response=True, name=name) as resp:
            if resp.status_code != 200:
                resp.failure(f"Approve failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def submit_and_approve(self):
        self._submit_and_approve()

    @task
    def roll_forward(self):
        self.state.weeks_ahead += 1
        effective, _ = delivery_window(self.state.weeks_ahead)
        with self.client.post(
            f"/price-lists/{self.state.price_list_ids[-1]}/duplicate",
            json={"new_effective_date": effective},
            headers=self.supplier,
            catch_response=True,
            name="POST /price-lists/{id}/duplicate",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Duplicate failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
            self.state.price_list_ids.append(resp.json()["id"])

        self._submit_and_approve()

    @task
    def verify_single_active_list(self):
        with self.client.get(
            f"/price-lists/supplier/{self.state.supplier_id}",
            headers=self.supplier,
            catch_response=True,
            name="GET /price-lists/supplier/{id}",
        ) as resp:
            active = [pl for pl in resp.json() if pl["status"] == "active"]
            if len(active) != 1:
                resp.failure(f"Expected one active price list, found {len(active)}")
        self.interrupt()


class PriceListUser(HttpUser):
    """Locust user simulating suppliers publishing weekly prices."""

    wait_time = between(1.0, 3.0)
    tasks = [PriceListApprovalJourney]
