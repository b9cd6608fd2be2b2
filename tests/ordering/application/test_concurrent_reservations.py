"""Concurrency tests: simultaneous orders against one material and racing status updates."""

import threading

import pytest
from ordering.errors import InsufficientQuantity, InvalidTransition
from ordering.order.order import Order

pytestmark = pytest.mark.slow


def _race(workers):
    """Start every callable at once; return each one's result or exception."""
    barrier = threading.Barrier(len(workers))
    results = [None] * len(workers)

    def run(index, work):
        barrier.wait()
        try:
            results[index] = work()
        except Exception as exc:  # noqa: BLE001
            results[index] = exc

    threads = [threading.Thread(target=run, args=(i, work)) for i, work in enumerate(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results


def _succeeded(results):
    return [r for r in results if isinstance(r, Order)]


class TestConcurrentOrders:
    def test_two_orders_for_more_than_half_the_stock(self, engine, material):
        results = _race(
            [
                lambda: engine.create_order(material.id, "buyer-a", 6, 60.0, "EUR"),
                lambda: engine.create_order(material.id, "buyer-b", 6, 60.0, "EUR"),
            ]
        )

        assert len(_succeeded(results)) == 1
        assert sum(isinstance(r, InsufficientQuantity) for r in results) == 1
        assert engine.get_material(material.id).available_quantity == 4.0

    def test_many_buyers_never_oversell(self, engine, material):
        results = _race(
            [
                lambda buyer=f"buyer-{i}": engine.create_order(material.id, buyer, 3, 30.0, "EUR")
                for i in range(10)
            ]
        )

        placed = _succeeded(results)
        assert len(placed) == 3
        assert all(isinstance(r, InsufficientQuantity) for r in results if not isinstance(r, Order))
        assert sum(order.quantity for order in placed) == 9.0
        assert engine.get_material(material.id).available_quantity == 1.0

    def test_stock_matches_committed_orders(self, engine, material):
        results = _race(
            [
                lambda buyer=f"buyer-{i}", quantity=q: engine.create_order(material.id, buyer, quantity, 10.0, "EUR")
                for i, q in enumerate([0.5, 1.25, 2, 4, 3.5, 0.75, 1, 2.5])
            ]
        )

        committed = sum(order.quantity for order in _succeeded(results))
        remaining = engine.get_material(material.id).available_quantity
        assert committed <= 10.0
        assert remaining == pytest.approx(10.0 - committed)
        assert remaining >= 0


class TestConcurrentStatusUpdates:
    def test_same_transition_applies_once(self, engine, pending_order, seller, buyer):
        results = _race(
            [
                lambda: engine.update_status(pending_order.id, "confirmed", seller),
                lambda: engine.update_status(pending_order.id, "confirmed", buyer),
            ]
        )

        assert len(_succeeded(results)) == 1
        assert sum(isinstance(r, InvalidTransition) for r in results) == 1
        assert engine.get_order(pending_order.id, buyer).status == "confirmed"

    def test_racing_cancellations_restock_once(self, engine, material, pending_order, seller, buyer):
        results = _race(
            [
                lambda: engine.update_status(pending_order.id, "cancelled", seller),
                lambda: engine.update_status(pending_order.id, "cancelled", buyer),
            ]
        )

        assert len(_succeeded(results)) == 1
        assert engine.get_material(material.id).available_quantity == 10.0
