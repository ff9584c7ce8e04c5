"""Checkout and order management load test scenarios.

ShopperJourney walks the happy path from registration to an order lookup.
HotProductUser points many shoppers at one low-stock product so the
per-product reservation path runs under contention; a 409 InsufficientStock
response is the expected outcome once the stock is gone, not a failure.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, constant_pacing, events, task

from loadtests.data_generators import checkout_data, user_data
from loadtests.helpers.response import extract_error_detail, is_stock_rejection
from loadtests.helpers.state import MerchantState, ShopperState
from loadtests.scenarios.catalogue import register_merchant, seed_products


class ShopperJourney(SequentialTaskSet):
    """Register -> Browse -> Checkout (mock) -> List Orders -> View Order."""

    def on_start(self):
        self.state = ShopperState()
        self.merchant = register_merchant(self.client)
        seed_products(self.client, self.merchant, 3)
        if not self.merchant.product_ids:
            self.interrupt()

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.state.user_id or ""}

    @task
    def register(self):
        with self.client.post("/users", json=user_data(), catch_response=True, name="POST /users") as resp:
            if resp.status_code == 201:
                self.state.user_id = resp.json()["user_id"]
            else:
                resp.failure(f"Register failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def browse(self):
        self.client.get("/products", params={"sort": "newest"}, name="GET /products")

    @task
    def checkout(self):
        payload = checkout_data(self.merchant.product_ids, payment_method=random.choice(["mock", "gateway"]))
        with self.client.post(
            "/checkout",
            json=payload,
            headers=self.headers,
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif is_stock_rejection(resp):
                self.state.rejected_checkouts += 1
                resp.success()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def list_orders(self):
        self.client.get("/orders", headers=self.headers, name="GET /orders")

    @task
    def view_order(self):
        if self.state.order_ids:
            self.client.get(f"/orders/{self.state.order_ids[-1]}", headers=self.headers, name="GET /orders/{id}")
        self.interrupt()


class ShopperUser(HttpUser):
    wait_time = between(1.0, 3.0)
    tasks = [ShopperJourney]


_hot_product = MerchantState()


@events.test_start.add_listener
def _reset_hot_product(**_kwargs):
    _hot_product.user_id = None
    _hot_product.product_ids.clear()


class HotProductUser(HttpUser):
    """Many shoppers buying one unit each of a product with little stock."""

    wait_time = constant_pacing(0.2)
    hot_stock = 25

    def on_start(self):
        self.state = ShopperState()
        resp = self.client.post("/users", json=user_data(), name="POST /users")
        self.state.user_id = resp.json().get("user_id") if resp.status_code == 201 else None

        if not _hot_product.product_ids:
            merchant = register_merchant(self.client)
            seed_products(self.client, merchant, 1, stock=self.hot_stock)
            _hot_product.user_id = merchant.user_id
            _hot_product.product_ids.extend(merchant.product_ids)

    @task(4)
    def buy_one(self):
        if not (self.state.user_id and _hot_product.product_ids):
            return
        payload = checkout_data(_hot_product.product_ids[:1])
        payload["items"] = [{"product_id": _hot_product.product_ids[0], "quantity": 1}]
        with self.client.post(
            "/checkout",
            json=payload,
            headers={"X-User-Id": self.state.user_id},
            catch_response=True,
            name="[HOT] POST /checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["id"])
            elif is_stock_rejection(resp) or resp.status_code == 503:
                self.state.rejected_checkouts += 1
                resp.success()
            else:
                resp.failure(f"Hot checkout failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task(1)
    def restock(self):
        """Occasionally put stock back so contention continues for the whole run."""
        if _hot_product.product_ids and random.random() < 0.2:
            self.client.post(
                f"/admin/products/{_hot_product.product_ids[0]}/restock",
                json={"quantity": 5},
                headers=_hot_product.headers,
                name="[HOT] POST /admin/products/{id}/restock",
            )


class OrderAdminJourney(SequentialTaskSet):
    """Admin lists recent orders, advances or cancels one, then checks analytics."""

    def on_start(self):
        self.merchant = register_merchant(self.client)
        if not self.merchant.user_id:
            self.interrupt()

    @task
    def advance_order(self):
        with self.client.get(
            "/admin/orders",
            params={"size": 20},
            headers=self.merchant.headers,
            catch_response=True,
            name="GET /admin/orders",
        ) as resp:
            orders = resp.json().get("items", []) if resp.status_code == 200 else []
        candidates = [o for o in orders if o["status"] in ("PENDING", "PAID", "SHIPPED")]
        if not candidates:
            return
        order = random.choice(candidates)
        target = {"PENDING": "CANCELLED", "PAID": "SHIPPED", "SHIPPED": "DELIVERED"}[order["status"]]
        with self.client.put(
            f"/admin/orders/{order['id']}/status",
            json={"status": target},
            headers=self.merchant.headers,
            catch_response=True,
            name="PUT /admin/orders/{id}/status",
        ) as resp:
            # Another admin may have moved the order first
            if resp.status_code == 409:
                resp.success()

    @task
    def analytics(self):
        self.client.get(
            "/admin/analytics",
            params={"days": 7},
            headers=self.merchant.headers,
            name="GET /admin/analytics",
        )

    @task
    def release_stale(self):
        self.client.post(
            "/admin/maintenance/release-stale-orders",
            json={},
            headers=self.merchant.headers,
            name="POST /admin/maintenance/release-stale-orders",
        )
        self.interrupt()
