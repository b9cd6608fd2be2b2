"""Tests for Material registration and stock movements."""

import pytest
from ordering.errors import InsufficientQuantity, InvalidInput
from ordering.ledger.events import MaterialRegistered, MaterialReserved, MaterialRestocked
from ordering.ledger.material import Material, MaterialUnit
from protean.exceptions import ValidationError


def _material(quantity=10.0, unit="kg"):
    material = Material.register(seller_id="seller-001", available_quantity=quantity, unit=unit, title="Linen")
    material._events.clear()
    return material


class TestMaterialRegistration:
    def test_register_sets_fields(self):
        material = Material.register(seller_id="seller-001", available_quantity=12.5, unit="m", title="Linen")
        assert material.seller_id == "seller-001"
        assert material.available_quantity == 12.5
        assert material.unit == MaterialUnit.METRES.value
        assert material.title == "Linen"
        assert material.created_at is not None

    def test_register_defaults_to_kilograms(self):
        material = Material.register(seller_id="seller-001", available_quantity=1.0)
        assert material.unit == "kg"

    def test_register_with_explicit_id(self):
        material = Material.register(seller_id="seller-001", available_quantity=1.0, material_id="mat-123")
        assert str(material.id) == "mat-123"

    def test_register_raises_event(self):
        material = Material.register(seller_id="seller-001", available_quantity=3.0)
        assert len(material._events) == 1
        event = material._events[0]
        assert isinstance(event, MaterialRegistered)
        assert event.material_id == str(material.id)
        assert event.available_quantity == 3.0

    def test_zero_quantity_is_allowed(self):
        material = Material.register(seller_id="seller-001", available_quantity=0)
        assert material.available_quantity == 0.0

    def test_negative_quantity_is_rejected(self):
        with pytest.raises(InvalidInput):
            Material.register(seller_id="seller-001", available_quantity=-1)

    def test_unknown_unit_is_rejected(self):
        with pytest.raises(ValidationError):
            Material.register(seller_id="seller-001", available_quantity=1, unit="bolts")


class TestMaterialReservation:
    def test_reserve_decrements_availability(self):
        material = _material(10.0)
        material.reserve(6.0, order_id="order-1")
        assert material.available_quantity == 4.0

    def test_reserve_whole_stock(self):
        material = _material(10.0)
        material.reserve(10.0, order_id="order-1")
        assert material.available_quantity == 0.0

    def test_reserve_raises_event(self):
        material = _material(10.0)
        material.reserve(2.5, order_id="order-1")
        event = material._events[0]
        assert isinstance(event, MaterialReserved)
        assert event.order_id == "order-1"
        assert event.previous_available == 10.0
        assert event.new_available == 7.5

    def test_reserve_more_than_available(self):
        material = _material(4.0)
        with pytest.raises(InsufficientQuantity) as exc:
            material.reserve(6.0, order_id="order-1")
        assert exc.value.details["available"] == 4.0
        assert exc.value.details["requested"] == 6.0
        assert material.available_quantity == 4.0
        assert material._events == []

    @pytest.mark.parametrize("quantity", [0, -1.0, 0.0004])
    def test_reserve_rejects_quantity_that_rounds_to_zero(self, quantity):
        material = _material()
        with pytest.raises(InvalidInput):
            material.reserve(quantity, order_id="order-1")

    def test_fractional_quantities_do_not_drift(self):
        material = _material(1.0)
        for _ in range(10):
            material.reserve(0.1, order_id="order-1")
        assert material.available_quantity == 0.0

    def test_reserve_takes_quantity_at_ledger_precision(self):
        material = _material(0.01)
        material.reserve(0.0006, order_id="order-1")
        assert material.available_quantity == 0.009
        assert material._events[-1].quantity == 0.001


class TestMaterialRestock:
    def test_restock_increments_availability(self):
        material = _material(4.0)
        material.restock(6.0, order_id="order-1")
        assert material.available_quantity == 10.0

    def test_restock_raises_event(self):
        material = _material(4.0)
        material.restock(1.5, order_id="order-1")
        event = material._events[0]
        assert isinstance(event, MaterialRestocked)
        assert event.new_available == 5.5

    def test_restock_non_positive_quantity(self):
        material = _material()
        with pytest.raises(InvalidInput):
            material.restock(0, order_id="order-1")
