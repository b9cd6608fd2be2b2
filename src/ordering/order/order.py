"""Order aggregate: a buyer's reservation of a seller's material.

Everything but ``status`` and ``updated_at`` is written once, when the order is
placed. Status follows a strict delivery lifecycle:

    PENDING → CONFIRMED → SHIPPED → DELIVERED
    PENDING/CONFIRMED → CANCELLED

DELIVERED and CANCELLED are terminal. PENDING is only ever set by placement.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering
from ordering.errors import Forbidden, InvalidStatus, InvalidTransition
from ordering.ledger.material import QUANTITY_PLACES
from ordering.order.events import OrderPlaced, OrderStatusChanged


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Statuses a party may request; PENDING is reserved for placement
REQUESTABLE_STATUSES = {
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
}

TERMINAL_STATUSES = {status for status, targets in _VALID_TRANSITIONS.items() if not targets}


@ordering.aggregate
class Order:
    """A transaction between the buyer and the material's seller at order time."""

    material_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    quantity = Float(required=True)
    total_amount = Float(required=True)
    currency = String(required=True, max_length=3)
    unit = String(required=True, max_length=10)
    material_title = String(max_length=255)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime(required=True)
    updated_at = DateTime(required=True)

    @invariant.post
    def quantity_and_total_are_positive(self):
        if self.quantity is not None and self.quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if self.total_amount is not None and self.total_amount <= 0:
            raise ValidationError({"total_amount": ["Total amount must be positive"]})

    @classmethod
    def place(cls, material, buyer_id, quantity, total_amount, currency):
        """Record a pending order against ``material``.

        Seller, unit and title are copied from the material as it stands now;
        later changes to the listing never reach the order. ``quantity`` is
        recorded at ledger precision, the same amount the ledger reserves.
        """
        now = datetime.now(UTC)
        order = cls(
            material_id=str(material.id),
            buyer_id=str(buyer_id),
            seller_id=str(material.seller_id),
            quantity=None if quantity is None else round(quantity, QUANTITY_PLACES),
            total_amount=total_amount,
            currency=currency,
            unit=material.unit,
            material_title=material.title,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                material_id=order.material_id,
                buyer_id=order.buyer_id,
                seller_id=order.seller_id,
                quantity=order.quantity,
                unit=order.unit,
                total_amount=order.total_amount,
                currency=order.currency,
                placed_at=now,
            )
        )
        return order

    def is_party(self, user_id) -> bool:
        return str(user_id) in (str(self.buyer_id), str(self.seller_id))

    def ensure_party(self, user_id):
        if not self.is_party(user_id):
            raise Forbidden(order_id=str(self.id), user_id=str(user_id))

    def change_status(self, new_status, requested_by):
        """Move the order to ``new_status`` on behalf of ``requested_by``.

        Returns the previous status. Ownership is checked before the requested
        value so that outsiders learn nothing about the order's state.
        """
        self.ensure_party(requested_by)

        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise InvalidStatus(f"Unknown order status: {new_status}", status=str(new_status)) from None
        if target not in REQUESTABLE_STATUSES:
            raise InvalidStatus(f"Status {target.value} cannot be requested", status=target.value)

        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidTransition(
                f"Cannot move order from {current.value} to {target.value}",
                order_id=str(self.id),
                current=current.value,
                requested=target.value,
            )

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_by=str(requested_by),
                changed_at=now,
            )
        )
        return current.value

    def to_summary(self) -> dict:
        return {
            "id": str(self.id),
            "material_id": str(self.material_id),
            "material_title": self.material_title,
            "buyer_id": str(self.buyer_id),
            "seller_id": str(self.seller_id),
            "quantity": self.quantity,
            "total_amount": self.total_amount,
            "currency": self.currency,
            "unit": self.unit,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
