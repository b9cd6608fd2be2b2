"""Fake notifier: records notifications in memory for test assertions."""

import threading

from ordering.notifier.port import NotifierPort


class FakeNotifier(NotifierPort):
    def __init__(self):
        self.notifications: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
        self._lock = threading.Lock()

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def notify(self, summary: dict) -> None:
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)

        with self._lock:
            self.notifications.append(summary)

    def events_for(self, order_id) -> list[str]:
        return [n["event"] for n in self.notifications if n["order"]["id"] == str(order_id)]

    def reset(self):
        """Clear recorded notifications (useful between tests)."""
        with self._lock:
            self.notifications.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
