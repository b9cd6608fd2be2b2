"""Domain events for the Material aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Material")
class MaterialRegistered:
    """A material listing was mirrored into the ledger with its sellable quantity."""

    __version__ = 1

    material_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String()
    unit = String(required=True)
    available_quantity = Float(required=True)
    registered_at = DateTime(required=True)


@ordering.event(part_of="Material")
class MaterialReserved:
    """Quantity was taken out of the sellable stock for an order."""

    __version__ = 1

    material_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Float(required=True)
    previous_available = Float(required=True)
    new_available = Float(required=True)
    reserved_at = DateTime(required=True)


@ordering.event(part_of="Material")
class MaterialRestocked:
    """Quantity held by a cancelled order was returned to sellable stock."""

    __version__ = 1

    material_id = Identifier(required=True)
    order_id = Identifier(required=True)
    quantity = Float(required=True)
    previous_available = Float(required=True)
    new_available = Float(required=True)
    restocked_at = DateTime(required=True)
