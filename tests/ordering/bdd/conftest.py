"""Shared BDD fixtures and step definitions for order placement and lifecycle."""

import pytest
from ordering.errors import OrderingError
from pytest_bdd import given, parsers, then, when


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def outcome():
    """What the last When step produced: an order and/or an engine error."""
    return {"order": None, "error": None}


def _attempt(outcome, action):
    try:
        outcome["order"] = action()
        outcome["error"] = None
    except OrderingError as exc:
        outcome["error"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('seller "{seller_id}" lists {quantity:g} kg of material'), target_fixture="listed")
def _(engine, seller_id, quantity):
    return engine.register_material(seller_id=seller_id, available_quantity=quantity, unit="kg")


@given(parsers.cfparse('buyer "{buyer_id}" has a pending order for {quantity:g} kg'))
def _(engine, listed, outcome, buyer_id, quantity):
    outcome["order"] = engine.create_order(listed.id, buyer_id, quantity, quantity * 10, "EUR")


@given("the order has been delivered")
def _(engine, listed, outcome):
    order = outcome["order"]
    for status in ("confirmed", "shipped", "delivered"):
        outcome["order"] = engine.update_status(order.id, status, listed.seller_id)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('buyer "{buyer_id}" orders {quantity:g} kg for {amount:g} {currency}'))
def _(engine, listed, outcome, buyer_id, quantity, amount, currency):
    _attempt(outcome, lambda: engine.create_order(listed.id, buyer_id, quantity, amount, currency))


@when(parsers.cfparse('"{user_id}" sets the order status to "{status}"'))
def _(engine, outcome, user_id, status):
    order_id = outcome["order"].id
    _attempt(outcome, lambda: engine.update_status(order_id, status, user_id))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the order is pending")
def _(outcome):
    assert outcome["error"] is None
    assert outcome["order"].status == "pending"


@then(parsers.cfparse('the order belongs to seller "{seller_id}"'))
def _(outcome, seller_id):
    assert outcome["order"].seller_id == seller_id


@then(parsers.cfparse('the order status is "{status}"'))
def _(engine, outcome, status):
    order = outcome["order"]
    assert engine.get_order(order.id, order.buyer_id).status == status


@then(parsers.cfparse("{quantity:g} kg of the material remain available"))
def _(engine, listed, quantity):
    assert engine.get_material(listed.id).available_quantity == quantity


@then(parsers.cfparse('the request fails with "{code}"'))
def _(outcome, code):
    assert outcome["error"] is not None
    assert outcome["error"].code == code


@then(parsers.cfparse('an "{event}" notification is sent'))
def _(engine, notifier, outcome, event):
    engine.dispatcher.drain(timeout=2)
    assert event in notifier.events_for(outcome["order"].id)


@then(parsers.cfparse('buyer "{buyer_id}" has no orders'))
def _(engine, buyer_id):
    assert engine.get_user_orders(buyer_id, role="buyer") == []
