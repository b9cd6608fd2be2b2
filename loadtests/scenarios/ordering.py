"""Ordering load test scenarios.

ContendedMaterialBuyer has many simulated buyers reserve from a handful of
shared materials at once; the engine must never sell more than was listed.
OrderLifecycleUser walks single orders through confirmation, shipping and
delivery, or cancels them.
"""

import random
import threading

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import material_data, order_data, user_id
from loadtests.helpers.response import error_code, extract_error_detail
from loadtests.helpers.state import MaterialState, OrderState


def _register_material(client, quantity=None) -> MaterialState | None:
    seller_id = user_id("seller")
    payload = material_data(seller_id, quantity=quantity)
    with client.post("/materials", json=payload, catch_response=True, name="POST /materials") as resp:
        if resp.status_code != 201:
            resp.failure(f"Register material failed: {resp.status_code} - {extract_error_detail(resp)}")
            return None
        return MaterialState(
            material_id=resp.json()["id"],
            seller_id=seller_id,
            listed_quantity=payload["available_quantity"],
        )


class ContendedMaterialBuyer(HttpUser):
    """Buyers racing for the same few listings.

    A 409 INSUFFICIENT_QUANTITY is the expected answer once a listing has sold
    out and is counted as a success; any other error is a failure.
    """

    wait_time = between(0.1, 0.5)

    # material_id -> seller_id, shared by every user of this class
    materials: dict[str, str] = {}
    _materials_lock = threading.Lock()
    contended_materials = 3

    def on_start(self):
        self.buyer_id = user_id("buyer")
        with self._materials_lock:
            if len(self.materials) < self.contended_materials:
                material = _register_material(self.client, quantity=100.0)
                if material is not None:
                    self.materials[material.material_id] = material.seller_id

    @task(10)
    def place_order(self):
        if not self.materials:
            return
        material_id = random.choice(list(self.materials))
        with self.client.post(
            "/transactions",
            json=order_data(material_id),
            headers={"X-User-Id": self.buyer_id},
            catch_response=True,
            name="POST /transactions",
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409 and error_code(resp) == "INSUFFICIENT_QUANTITY":
                resp.success()
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task(2)
    def list_orders(self):
        self.client.get(
            "/transactions",
            params={"role": "buyer"},
            headers={"X-User-Id": self.buyer_id},
            name="GET /transactions",
        )

    @task(1)
    def check_material(self):
        if not self.materials:
            return
        material_id = random.choice(list(self.materials))
        with self.client.get(
            f"/materials/{material_id}", catch_response=True, name="GET /materials/{id}"
        ) as resp:
            if resp.status_code == 200 and resp.json()["available_quantity"] < 0:
                resp.failure(f"Material {material_id} oversold: {resp.json()['available_quantity']}")


class OrderLifecycleJourney(SequentialTaskSet):
    """List Material -> Place Order -> Confirm -> Ship -> Deliver (or Cancel)."""

    def on_start(self):
        self.material = _register_material(self.client)
        self.state = OrderState(buyer_id=user_id("buyer"))
        if self.material is None:
            self.interrupt()

    def _set_status(self, status, user):
        with self.client.put(
            f"/transactions/{self.state.order_id}/status",
            json={"status": status},
            headers={"X-User-Id": user},
            catch_response=True,
            name="PUT /transactions/{id}/status",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
                return True
            resp.failure(f"Set status {status} failed: {resp.status_code} - {extract_error_detail(resp)}")
            self.interrupt()
            return False

    @task
    def place_order(self):
        with self.client.post(
            "/transactions",
            json=order_data(self.material.material_id, quantity=1.0),
            headers={"X-User-Id": self.state.buyer_id},
            catch_response=True,
            name="POST /transactions",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["id"]
                self.state.placed.append(self.state.order_id)
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def confirm_or_cancel(self):
        if random.random() < 0.2:
            self._set_status("cancelled", self.state.buyer_id)
            self.interrupt()
        else:
            self._set_status("confirmed", self.material.seller_id)

    @task
    def ship(self):
        self._set_status("shipped", self.material.seller_id)

    @task
    def deliver(self):
        self._set_status("delivered", self.state.buyer_id)

    @task
    def read_back(self):
        self.client.get(
            f"/transactions/{self.state.order_id}",
            headers={"X-User-Id": self.state.buyer_id},
            name="GET /transactions/{id}",
        )
        self.interrupt()


class OrderLifecycleUser(HttpUser):
    wait_time = between(0.5, 2)
    tasks = [OrderLifecycleJourney]
