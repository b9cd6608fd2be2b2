"""Material aggregate: the ledger's record of sellable quantity per listing.

The listing itself (title, pricing, images) is owned by the catalogue service;
the ledger mirrors only what a reservation needs: who sells it, how much is
left and in which unit. ``available_quantity`` is the unit of contention and
can never go negative.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering
from ordering.errors import InsufficientQuantity, InvalidInput
from ordering.ledger.events import MaterialRegistered, MaterialReserved, MaterialRestocked

# Quantities are decimals in metres, kilograms, yards or pounds
QUANTITY_PLACES = 3


class MaterialUnit(Enum):
    METRES = "m"
    KILOGRAMS = "kg"
    YARDS = "yards"
    POUNDS = "lbs"


@ordering.aggregate
class Material:
    """Sellable stock of one material listing."""

    seller_id = Identifier(required=True)
    title = String(max_length=255)
    available_quantity = Float(default=0.0)
    unit = String(choices=MaterialUnit, default=MaterialUnit.KILOGRAMS.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def available_quantity_is_never_negative(self):
        if self.available_quantity is not None and self.available_quantity < 0:
            raise ValidationError({"available_quantity": ["Available quantity cannot be negative"]})

    @classmethod
    def register(cls, seller_id, available_quantity, unit=MaterialUnit.KILOGRAMS.value, title=None, material_id=None):
        if available_quantity is None or available_quantity < 0:
            raise InvalidInput("Available quantity must be zero or more", field="available_quantity")

        now = datetime.now(UTC)
        attributes = dict(
            seller_id=seller_id,
            title=title,
            available_quantity=round(float(available_quantity), QUANTITY_PLACES),
            unit=unit or MaterialUnit.KILOGRAMS.value,
            created_at=now,
            updated_at=now,
        )
        if material_id is not None:
            attributes["id"] = material_id

        material = cls(**attributes)
        material.raise_(
            MaterialRegistered(
                material_id=str(material.id),
                seller_id=str(seller_id),
                title=title,
                unit=material.unit,
                available_quantity=material.available_quantity,
                registered_at=now,
            )
        )
        return material

    def reserve(self, quantity, order_id):
        """Take ``quantity`` out of sellable stock for ``order_id``.

        ``quantity`` is taken at ledger precision; anything that rounds to zero
        is rejected.
        """
        if quantity is not None:
            quantity = round(quantity, QUANTITY_PLACES)
        if quantity is None or quantity <= 0:
            raise InvalidInput("Quantity must be positive", field="quantity")

        available = self.available_quantity or 0.0
        if quantity > available:
            raise InsufficientQuantity(
                f"Insufficient material quantity: {available} {self.unit} available, {quantity} requested",
                material_id=str(self.id),
                available=available,
                requested=quantity,
            )

        now = datetime.now(UTC)
        self.available_quantity = round(available - quantity, QUANTITY_PLACES)
        self.updated_at = now
        self.raise_(
            MaterialReserved(
                material_id=str(self.id),
                order_id=str(order_id),
                quantity=quantity,
                previous_available=available,
                new_available=self.available_quantity,
                reserved_at=now,
            )
        )

    def restock(self, quantity, order_id):
        """Return ``quantity`` held by a cancelled order to sellable stock."""
        if quantity is None or quantity <= 0:
            raise InvalidInput("Quantity must be positive", field="quantity")

        available = self.available_quantity or 0.0
        now = datetime.now(UTC)
        self.available_quantity = round(available + quantity, QUANTITY_PLACES)
        self.updated_at = now
        self.raise_(
            MaterialRestocked(
                material_id=str(self.id),
                order_id=str(order_id),
                quantity=quantity,
                previous_available=available,
                new_available=self.available_quantity,
                restocked_at=now,
            )
        )
