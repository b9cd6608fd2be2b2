"""Order status changes: command and handler.

The current status is read, validated against the state machine and written
in one unit of work, so two concurrent updates can never both act on the same
starting status.
"""

from protean import handle
from protean.fields import Boolean, Identifier, String

from ordering.domain import logger, ordering
from ordering.errors import InvalidTransition
from ordering.ledger.ledger import InventoryLedger
from ordering.order.order import Order, OrderStatus
from ordering.order.store import TransactionStore


@ordering.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String()
    requested_by = Identifier(required=True)
    restock_on_cancel = Boolean(default=False)


@ordering.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        store = TransactionStore()
        order = store.get(command.order_id)

        try:
            previous = order.change_status(command.status, requested_by=command.requested_by)
        except InvalidTransition:
            logger.info(
                "Status change rejected",
                order_id=str(order.id),
                current=order.status,
                requested=command.status,
            )
            raise
        store.add(order)

        if order.status == OrderStatus.CANCELLED.value and command.restock_on_cancel:
            ledger = InventoryLedger()
            material = ledger.get_for_reservation(order.material_id)
            ledger.restock(material, order.quantity, order_id=order.id)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous,
            new_status=order.status,
            changed_by=str(command.requested_by),
        )
        return previous
