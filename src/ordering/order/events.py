"""Domain events for the Order aggregate.

Orders are never deleted; together with the ledger's events these form the
immutable history of every reservation and status change.
"""

from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A buyer reserved material and a pending order was recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    material_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    quantity = Float(required=True)
    unit = String(required=True)
    total_amount = Float(required=True)
    currency = String(required=True, max_length=3)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An order moved along its delivery lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)
