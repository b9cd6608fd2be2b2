"""Order placement: command and handler.

The handler runs inside one unit of work: locked read of the material, the
availability check, the decrement and the order insert commit or abort
together. The caller must already hold the material's reservation lock.
"""

from protean import handle
from protean.fields import Float, Identifier, String

from ordering.domain import logger, ordering
from ordering.errors import InsufficientQuantity
from ordering.ledger.ledger import InventoryLedger
from ordering.order.order import Order
from ordering.order.store import TransactionStore


@ordering.command(part_of="Order")
class PlaceOrder:
    material_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    quantity = Float(required=True)
    total_amount = Float(required=True)
    currency = String(required=True, max_length=3)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        ledger = InventoryLedger()
        material = ledger.get_for_reservation(command.material_id)

        order = Order.place(
            material=material,
            buyer_id=command.buyer_id,
            quantity=command.quantity,
            total_amount=command.total_amount,
            currency=command.currency,
        )
        try:
            ledger.decrement(material, order.quantity, order_id=order.id)
        except InsufficientQuantity:
            logger.info(
                "Order rejected, insufficient quantity",
                material_id=str(command.material_id),
                buyer_id=str(command.buyer_id),
                requested=command.quantity,
                available=material.available_quantity,
            )
            raise
        TransactionStore().add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            material_id=order.material_id,
            quantity=order.quantity,
            remaining=material.available_quantity,
        )
        return str(order.id)
