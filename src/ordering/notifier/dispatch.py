"""Fire-and-forget delivery of order notifications.

Notifications are handed to a small thread pool once the order's unit of work
has committed. A failing notifier is logged and otherwise ignored: the order
it describes stays committed and the caller never sees the error.
"""

import threading
from concurrent import futures
from concurrent.futures import Future, ThreadPoolExecutor

from ordering.notifier import get_notifier
from ordering.notifier.port import NotifierPort
from ordering.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_PLACED = "order.placed"
ORDER_STATUS_CHANGED = "order.status_changed"


class NotificationDispatcher:
    def __init__(self, notifier: NotifierPort | None = None, max_workers: int | None = None):
        if max_workers is None:
            from ordering.settings import notifier_max_workers

            max_workers = notifier_max_workers()

        # None means "whatever get_notifier() returns at delivery time"
        self._notifier = notifier
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="order-notifier")
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def dispatch(self, event: str, order: dict, previous_status: str | None = None) -> Future | None:
        """Queue a notification; returns None if the dispatcher no longer accepts work."""
        summary = {"event": event, "order": order}
        if previous_status is not None:
            summary["previous_status"] = previous_status

        try:
            future = self._executor.submit(self._deliver, summary)
        except RuntimeError:
            logger.warning(
                "Order notification dropped, dispatcher is shut down",
                notification=event,
                order_id=order["id"],
            )
            return None
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _deliver(self, summary: dict) -> bool:
        try:
            notifier = self._notifier or get_notifier()
            notifier.notify(summary)
        except Exception:
            logger.exception(
                "Order notification failed",
                notification=summary["event"],
                order_id=summary["order"]["id"],
            )
            return False
        return True

    def drain(self, timeout: float | None = None) -> None:
        """Block until every notification dispatched so far has been attempted."""
        with self._lock:
            pending = list(self._pending)
        futures.wait(pending, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
