"""Order lifecycle load test scenarios.

Two stateful SequentialTaskSet journeys: the happy path from association to
delivery, and an order rejected at the admin approval gate.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    business_name,
    category_data,
    identity_headers,
    order_data,
    price_item_data,
    price_list_data,
    product_data,
    surcharge_data,
    user_id,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import TradingState


class _TradingJourney(SequentialTaskSet):
    """Shared setup: a fresh supplier with an active price list and an associated customer."""

    def on_start(self):
        self.state = TradingState(
            admin_id=user_id("admin"),
            supplier_id=user_id("supplier"),
            supplier_name=business_name(),
            customer_id=user_id("customer"),
            customer_name=business_name(),
        )

    @property
    def admin(self):
        return identity_headers(self.state.admin_id, "admin", "Load Admin")

    @property
    def supplier(self):
        return identity_headers(self.state.supplier_id, "supplier", self.state.supplier_name)

    @property
    def customer(self):
        return identity_headers(self.state.customer_id, "customer", self.state.customer_name)

    def _created(self, resp, what):
        if resp.status_code == 201:
            return resp.json()["id"]
        resp.failure(f"Create {what} failed: {resp.status_code} — {extract_error_detail(resp)}")
        self.interrupt()

    @task
    def associate(self):
        with self.client.post(
            "/associations",
            json={
                "customer_id": self.state.customer_id,
                "customer_name": self.state.customer_name,
                "supplier_id": self.state.supplier_id,
                "supplier_name": self.state.supplier_name,
            },
            headers=self.admin,
            catch_response=True,
            name="POST /associations",
        ) as resp:
            self._created(resp, "association")

    @task
    def build_catalogue(self):
        with self.client.post(
            "/categories",
            json=category_data(self.state.supplier_id),
            headers=self.supplier,
            catch_response=True,
            name="POST /categories",
        ) as resp:
            self.state.category_id = self._created(resp, "category")

        for _ in range(3):
            with self.client.post(
                "/products",
                json=product_data(self.state.supplier_id, self.state.category_id),
                headers=self.supplier,
                catch_response=True,
                name="POST /products",
            ) as resp:
                self.state.product_ids.append(self._created(resp, "product"))

    @task
    def publish_price_list(self):
        with self.client.post(
            "/price-lists",
            json=price_list_data(self.state.supplier_id, self.state.supplier_name),
            headers=self.supplier,
            catch_response=True,
            name="POST /price-lists",
        ) as resp:
            self.state.price_list_id = self._created(resp, "price list")

        for product_id in self.state.product_ids:
            self.client.put(
                f"/price-lists/{self.state.price_list_id}/items/{product_id}",
                json=price_item_data(),
                headers=self.supplier,
                name="PUT /price-lists/{id}/items/{product_id}",
            )
        self.client.put(
            f"/price-lists/{self.state.price_list_id}/surcharges/{self.state.category_id}",
            json=surcharge_data(),
            headers=self.supplier,
            name="PUT /price-lists/{id}/surcharges/{category_id}",
        )
        with self.client.post(
            f"/price-lists/{self.state.price_list_id}/activate",
            headers=self.supplier,
            catch_response=True,
            name="POST /price-lists/{id}/activate",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Activate failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=order_data(self.state.supplier_id, self.state.price_list_id, self.state.product_ids),
            headers=self.customer,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            self.state.order_id = self._created(resp, "order")

    @task
    def supplier_cannot_see_unapproved_order(self):
        with self.client.get(
            f"/orders/{self.state.order_id}",
            headers=self.supplier,
            catch_response=True,
            name="GET /orders/{id} (supplier, unapproved)",
        ) as resp:
            if resp.status_code == 404:
                resp.success()
            else:
                resp.failure(f"Unapproved order leaked to supplier: {resp.status_code}")


class OrderLifecycleJourney(_TradingJourney):
    """Associate -> Catalogue -> Price List -> Order -> Approve -> Confirm -> ... -> Deliver.

    Generates events: AssociationCreated, CategoryCreated, ProductCreated (x3),
    PriceListCreated, PriceListItemSet (x3), VacSurchargeSet, PriceListActivated,
    OrderPlaced, ApprovalRequested, OrderApproved, NotificationRead,
    OrderStatusChanged (x5).
    """

    @task
    def approve(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/approve",
            headers=self.admin,
            catch_response=True,
            name="POST /orders/{id}/approve",
        ) as resp:
            if resp.status_code == 200:
                self.state.order_status = "pending"
            else:
                resp.failure(f"Approve failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def progress_to_delivery(self):
        for status in ("confirmed", "processing", "shipped", "delivered"):
            with self.client.put(
                f"/orders/{self.state.order_id}/status",
                json={"status": status},
                headers=self.supplier,
                catch_response=True,
                name=f"PUT /orders/{{id}}/status ({status})",
            ) as resp:
                if resp.status_code == 200:
                    self.state.order_status = status
                else:
                    resp.failure(f"{status} failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def done(self):
        self.interrupt()


class OrderRejectionJourney(_TradingJourney):
    """Associate -> Catalogue -> Price List -> Order -> Reject -> Retry Reject.

    The repeated rejection must succeed without changing anything.
    """

    @task
    def reject(self):
        for attempt in ("first", "retry"):
            with self.client.post(
                f"/orders/{self.state.order_id}/reject",
                headers=self.admin,
                catch_response=True,
                name=f"POST /orders/{{id}}/reject ({attempt})",
            ) as resp:
                if resp.status_code == 200:
                    self.state.order_status = "cancelled"
                else:
                    resp.failure(f"Reject failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    """Locust user simulating the B2B ordering flow.

    Weighted distribution:
    - 75% Full order lifecycle (happy path)
    - 25% Order rejected at the approval gate
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        OrderLifecycleJourney: 3,
        OrderRejectionJourney: 1,
    }
