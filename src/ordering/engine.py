"""Order Engine: the only way orders are created or moved along their lifecycle.

The engine owns the concurrency boundary around Protean's units of work:

* ``create_order`` takes the material's reservation lock, runs ``PlaceOrder``
  (locked read, availability check, decrement, insert in one unit of work) and
  releases the lock only after the unit of work has committed or aborted.
* ``update_status`` takes the order's lock (and the material's, when a
  cancellation restores stock) around ``ChangeOrderStatus``, which re-reads the
  current status inside its unit of work.

Each call pushes its own domain context, so the engine can be shared by any
number of request-handling threads. Notifications go out only after commit.
"""

import math
from decimal import Decimal

import pydantic
from protean.exceptions import ExpectedVersionError, ValidationError
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.errors import Conflict, InvalidInput
from ordering.ledger.ledger import InventoryLedger
from ordering.ledger.locks import get_locks, material_key, order_key
from ordering.ledger.material import QUANTITY_PLACES, Material
from ordering.ledger.registration import RegisterMaterial
from ordering.notifier.dispatch import ORDER_PLACED, ORDER_STATUS_CHANGED, NotificationDispatcher
from ordering.order.order import Order, OrderStatus
from ordering.order.placement import PlaceOrder
from ordering.order.status import ChangeOrderStatus
from ordering.order.store import TransactionStore
from ordering.utils.logging import log_context

ROLES = ("buyer", "seller", "all")


def _reference(name, value) -> str:
    if value is None or isinstance(value, bool) or not str(value).strip():
        raise InvalidInput(f"{name} is required", field=name)
    value = str(value).strip()
    if len(value) > 255:
        raise InvalidInput(f"{name} is too long", field=name)
    return value


def _positive_number(name, value) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float | Decimal | str):
        raise InvalidInput(f"{name} must be a number", field=name)
    try:
        number = float(value)
    except ValueError:
        raise InvalidInput(f"{name} must be a number", field=name) from None
    if not math.isfinite(number) or number <= 0:
        raise InvalidInput(f"{name} must be greater than zero", field=name)
    return number


def _quantity(value) -> float:
    """A positive quantity at ledger precision; what is ordered is exactly what is reserved."""
    quantity = round(_positive_number("quantity", value), QUANTITY_PLACES)
    if quantity <= 0:
        raise InvalidInput(f"quantity must be at least {10**-QUANTITY_PLACES}", field="quantity")
    return quantity


def _currency(value) -> str:
    if not isinstance(value, str) or len(value.strip()) != 3 or not value.strip().isalpha():
        raise InvalidInput("currency must be a 3-letter code", field="currency")
    return value.strip().upper()


def _build(command_cls, message, **fields):
    try:
        return command_cls(**fields)
    except ValidationError as exc:
        raise InvalidInput(message, errors=exc.messages) from exc
    except pydantic.ValidationError as exc:
        errors = {
            ".".join(str(part) for part in error["loc"]) or "__all__": [error["msg"]]
            for error in exc.errors(include_url=False, include_context=False)
        }
        raise InvalidInput(message, errors=errors) from exc


class OrderEngine:
    def __init__(
        self,
        domain=None,
        dispatcher: NotificationDispatcher | None = None,
        restore_inventory_on_cancel: bool | None = None,
    ):
        if restore_inventory_on_cancel is None:
            from ordering.settings import restore_inventory_on_cancel as configured

            restore_inventory_on_cancel = configured()

        self.domain = domain or ordering
        self.locks = get_locks()
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.restore_inventory_on_cancel = restore_inventory_on_cancel
        self.ledger = InventoryLedger(self.locks)
        self.store = TransactionStore()

    # -------------------------------------------------------------------
    # Ledger seeding
    # -------------------------------------------------------------------
    def register_material(self, seller_id, available_quantity, unit="kg", title=None, material_id=None) -> Material:
        """Mirror a catalogue listing into the ledger."""
        with self.domain.domain_context():
            command = _build(
                RegisterMaterial,
                "Invalid material",
                material_id=material_id,
                seller_id=_reference("seller_id", seller_id),
                title=title,
                available_quantity=available_quantity,
                unit=unit,
            )
            registered_id = current_domain.process(command, asynchronous=False)
            return self.ledger.get(registered_id)

    def get_material(self, material_id) -> Material:
        with self.domain.domain_context():
            return self.ledger.get(material_id)

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def create_order(self, material_id, buyer_id, quantity, total_amount, currency) -> Order:
        """Reserve ``quantity`` of a material for ``buyer_id`` and record a pending order.

        ``quantity`` is rounded to the ledger's precision before anything is
        reserved.

        Raises:
            InvalidInput: malformed ids, quantity, amount or currency.
            MaterialNotFound: no material with ``material_id``.
            InsufficientQuantity: ``quantity`` exceeds what is left.
            Conflict: the lock could not be taken in time, or the store
                detected a concurrent write.
        """
        material_id = _reference("material_id", material_id)
        buyer_id = _reference("buyer_id", buyer_id)
        quantity = _quantity(quantity)
        total_amount = _positive_number("total_amount", total_amount)
        currency = _currency(currency)

        with log_context(material_id=material_id, buyer_id=buyer_id), self.domain.domain_context():
            command = _build(
                PlaceOrder,
                "Invalid order request",
                material_id=material_id,
                buyer_id=buyer_id,
                quantity=quantity,
                total_amount=total_amount,
                currency=currency,
            )

            try:
                with self.locks.hold(material_key(material_id)):
                    order_id = current_domain.process(command, asynchronous=False)
            except ExpectedVersionError as exc:
                logger.warning("Concurrent write detected while placing order")
                raise Conflict(material_id=material_id) from exc

            order = self.store.get(order_id)
            summary = order.to_summary()

        self.dispatcher.dispatch(ORDER_PLACED, summary)
        return order

    def get_user_orders(self, user_id, role="all") -> list[Order]:
        """Orders where ``user_id`` is the buyer, the seller, or either; newest first."""
        user_id = _reference("user_id", user_id)
        if role not in ROLES:
            raise InvalidInput(f"role must be one of {', '.join(ROLES)}", field="role")

        with self.domain.domain_context():
            if role == "buyer":
                return self.store.for_buyer(user_id)
            if role == "seller":
                return self.store.for_seller(user_id)
            return self.store.for_party(user_id)

    def get_order(self, order_id, requesting_user_id) -> Order:
        order_id = _reference("order_id", order_id)
        requesting_user_id = _reference("requesting_user_id", requesting_user_id)

        with self.domain.domain_context():
            order = self.store.get(order_id)
        order.ensure_party(requesting_user_id)
        return order

    def update_status(self, order_id, new_status, requesting_user_id) -> Order:
        """Move an order along its lifecycle on behalf of its buyer or seller.

        Raises:
            NotFound: no order with ``order_id``.
            Forbidden: the requester is neither buyer nor seller, whatever
                status they asked for.
            InvalidStatus: ``new_status`` is not a status a party may request.
            InvalidTransition: the state machine does not allow the move.
            Conflict: the store detected a concurrent write.
        """
        order_id = _reference("order_id", order_id)
        requesting_user_id = _reference("requesting_user_id", requesting_user_id)
        status = "" if new_status is None else str(new_status)

        with log_context(order_id=order_id, requested_by=requesting_user_id), self.domain.domain_context():
            order = self.store.get(order_id)
            order.ensure_party(requesting_user_id)

            restock = self.restore_inventory_on_cancel and status == OrderStatus.CANCELLED.value
            keys = [material_key(order.material_id)] if restock else []
            keys.append(order_key(order_id))

            command = _build(
                ChangeOrderStatus,
                "Invalid status update",
                order_id=order_id,
                status=status,
                requested_by=requesting_user_id,
                restock_on_cancel=restock,
            )

            try:
                with self.locks.hold(*keys):
                    previous_status = current_domain.process(command, asynchronous=False)
            except ExpectedVersionError as exc:
                logger.warning("Concurrent write detected while changing status")
                raise Conflict(order_id=order_id) from exc

            order = self.store.get(order_id)
            summary = order.to_summary()

        self.dispatcher.dispatch(ORDER_STATUS_CHANGED, summary, previous_status=previous_status)
        return order


_engine_instance: OrderEngine | None = None


def get_engine() -> OrderEngine:
    """Return the process-wide Order Engine (singleton)."""
    global _engine_instance
    if _engine_instance is None:
        _engine_instance = OrderEngine()
    return _engine_instance


def set_engine(engine: OrderEngine) -> None:
    """Override the active engine (useful for tests)."""
    global _engine_instance
    _engine_instance = engine


def reset_engine() -> None:
    global _engine_instance
    if _engine_instance is not None:
        _engine_instance.dispatcher.shutdown(wait=True)
    _engine_instance = None
