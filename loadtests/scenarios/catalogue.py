"""Catalog load test scenarios.

MerchantJourney seeds products the way an administrator would; BrowsingUser
generates the read-heavy traffic of shoppers filtering and paging the
catalog.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import image_data, product_data, search_params, user_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import MerchantState


def register_merchant(client) -> MerchantState:
    state = MerchantState()
    with client.post("/users", json=user_data(role="ADMIN"), catch_response=True, name="POST /users") as resp:
        if resp.status_code == 201:
            state.user_id = resp.json()["user_id"]
        else:
            resp.failure(f"Register admin failed: {resp.status_code} — {extract_error_detail(resp)}")
    return state


def seed_products(client, state: MerchantState, count: int, stock: int | None = None) -> None:
    for _ in range(count):
        with client.post(
            "/admin/products",
            json=product_data(stock=stock),
            headers=state.headers,
            catch_response=True,
            name="POST /admin/products",
        ) as resp:
            if resp.status_code == 201:
                state.product_ids.append(resp.json()["product_id"])
            else:
                resp.failure(f"Create product failed: {resp.status_code} — {extract_error_detail(resp)}")


class MerchantJourney(SequentialTaskSet):
    """Register Admin -> Create Product -> Add Image -> Update Price -> Restock -> Deactivate."""

    def on_start(self):
        self.state = register_merchant(self.client)
        if not self.state.user_id:
            self.interrupt()

    @task
    def create_product(self):
        seed_products(self.client, self.state, 1)
        if not self.state.product_ids:
            self.interrupt()

    @task
    def add_image(self):
        self.client.post(
            f"/admin/products/{self.state.product_ids[-1]}/images",
            json=image_data(),
            headers=self.state.headers,
            name="POST /admin/products/{id}/images",
        )

    @task
    def change_price(self):
        self.client.put(
            f"/admin/products/{self.state.product_ids[-1]}",
            json={"price_cents": random.randint(5, 500) * 1000},
            headers=self.state.headers,
            name="PUT /admin/products/{id}",
        )

    @task
    def restock(self):
        self.client.post(
            f"/admin/products/{self.state.product_ids[-1]}/restock",
            json={"quantity": random.randint(5, 50)},
            headers=self.state.headers,
            name="POST /admin/products/{id}/restock",
        )

    @task
    def deactivate(self):
        self.client.delete(
            f"/admin/products/{self.state.product_ids[-1]}",
            headers=self.state.headers,
            name="DELETE /admin/products/{id}",
        )
        self.interrupt()


class BrowsingUser(HttpUser):
    """Read-only catalog traffic: searches, product pages, slug lookups."""

    wait_time = between(0.5, 2.0)

    @task(5)
    def search(self):
        params = search_params()
        params["page"] = random.randint(0, 2)
        with self.client.get("/products", params=params, catch_response=True, name="GET /products") as resp:
            if resp.status_code != 200:
                resp.failure(f"Search failed: {resp.status_code} — {extract_error_detail(resp)}")
                return
            items = resp.json()["items"]
        if items:
            product = random.choice(items)
            self.client.get(f"/products/{product['id']}", name="GET /products/{id}")
            self.client.get(f"/products/slug/{product['slug']}", name="GET /products/slug/{slug}")

    @task(1)
    def health(self):
        self.client.get("/health", name="GET /health")
