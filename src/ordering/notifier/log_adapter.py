"""Log notifier: writes order notifications to the structured log.

Stands in for the mail service until a delivery channel is wired up.
"""

from ordering.notifier.port import NotifierPort
from ordering.utils.logging import get_logger

logger = get_logger(__name__)


class LogNotifier(NotifierPort):
    def notify(self, summary: dict) -> None:
        order = summary["order"]
        logger.info(
            "Order notification",
            notification=summary["event"],
            order_id=order["id"],
            buyer_id=order["buyer_id"],
            seller_id=order["seller_id"],
            status=order["status"],
            previous_status=summary.get("previous_status"),
        )
