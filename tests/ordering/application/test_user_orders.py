"""Application tests for reading orders back: per-user listings and single lookups."""

import time

import pytest
from ordering.errors import Forbidden, InvalidInput, OrderNotFound


def _ids(orders):
    return [str(order.id) for order in orders]


@pytest.fixture()
def marketplace(engine):
    """Two sellers, and a user who both buys and sells."""
    wool = engine.register_material(seller_id="seller-a", available_quantity=100, unit="kg")
    silk = engine.register_material(seller_id="trader", available_quantity=100, unit="m")

    orders = {}
    orders["trader_buys_wool"] = engine.create_order(wool.id, "trader", 1, 10.0, "EUR")
    time.sleep(0.002)
    orders["buyer_buys_silk"] = engine.create_order(silk.id, "buyer-x", 2, 20.0, "EUR")
    time.sleep(0.002)
    orders["buyer_buys_wool"] = engine.create_order(wool.id, "buyer-x", 3, 30.0, "EUR")
    return orders


class TestUserOrders:
    def test_buyer_role(self, engine, marketplace):
        orders = engine.get_user_orders("trader", role="buyer")
        assert _ids(orders) == [str(marketplace["trader_buys_wool"].id)]

    def test_seller_role(self, engine, marketplace):
        orders = engine.get_user_orders("trader", role="seller")
        assert _ids(orders) == [str(marketplace["buyer_buys_silk"].id)]

    def test_all_role_is_union_newest_first(self, engine, marketplace):
        orders = engine.get_user_orders("trader")
        assert _ids(orders) == [
            str(marketplace["buyer_buys_silk"].id),
            str(marketplace["trader_buys_wool"].id),
        ]

    def test_buyer_listing_is_newest_first(self, engine, marketplace):
        orders = engine.get_user_orders("buyer-x", role="buyer")
        assert _ids(orders) == [
            str(marketplace["buyer_buys_wool"].id),
            str(marketplace["buyer_buys_silk"].id),
        ]
        assert orders[0].created_at >= orders[1].created_at

    def test_unknown_user_has_no_orders(self, engine, marketplace):
        assert engine.get_user_orders("nobody") == []

    def test_repeated_reads_are_identical(self, engine, marketplace):
        first = [order.to_summary() for order in engine.get_user_orders("buyer-x")]
        second = [order.to_summary() for order in engine.get_user_orders("buyer-x")]
        assert first == second

    def test_reads_do_not_change_stock(self, engine, marketplace):
        material_id = marketplace["buyer_buys_wool"].material_id
        before = engine.get_material(material_id).available_quantity
        engine.get_user_orders("buyer-x")
        assert engine.get_material(material_id).available_quantity == before

    def test_invalid_role(self, engine, marketplace):
        with pytest.raises(InvalidInput):
            engine.get_user_orders("buyer-x", role="admin")

    def test_missing_user(self, engine):
        with pytest.raises(InvalidInput):
            engine.get_user_orders("")


class TestGetOrder:
    def test_parties_can_read_order(self, engine, pending_order, buyer, seller):
        assert engine.get_order(pending_order.id, buyer).id == pending_order.id
        assert engine.get_order(pending_order.id, seller).id == pending_order.id

    def test_outsider_cannot_read_order(self, engine, pending_order):
        with pytest.raises(Forbidden):
            engine.get_order(pending_order.id, "outsider")

    def test_unknown_order(self, engine, buyer):
        with pytest.raises(OrderNotFound):
            engine.get_order("missing", buyer)
