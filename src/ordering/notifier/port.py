"""Notifier port: abstract interface for order notifications.

The engine tells the notifier about new and updated orders only after the
order has committed. Adapters may raise; the dispatcher absorbs failures.
"""

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    """Abstract interface for notifier adapters."""

    @abstractmethod
    def notify(self, summary: dict) -> None:
        """Deliver an order notification.

        Args:
            summary: dict with keys: event ("order.placed" or
                "order.status_changed"), order (the order record),
                and previous_status for status changes.
        """
        ...
