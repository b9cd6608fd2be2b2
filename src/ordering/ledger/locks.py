"""Reservation locks: exclusive, per-key locks held across a unit of work.

A material's availability may only be read for reservation while its lock is
held, and the lock is released only after the unit of work that decrements it
has committed or aborted. Keys are independent: holding the lock of one
material never blocks reservations of another.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from ordering.errors import Conflict


def material_key(material_id) -> str:
    return f"material:{material_id}"


def order_key(order_id) -> str:
    return f"order:{order_id}"


class ReservationLocks:
    """Registry handing out one lock per key, tracking the owning thread."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self._owners: dict[str, int] = {}

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, *keys: str, timeout: float | None = None) -> Iterator[None]:
        """Acquire the locks for ``keys`` in the given order, release in reverse.

        Raises ``Conflict`` if any lock cannot be acquired within ``timeout``
        seconds; locks already taken are released first.
        """
        timeout = self.timeout if timeout is None else timeout
        acquired: list[str] = []
        try:
            for key in keys:
                if not self._lock_for(key).acquire(timeout=timeout):
                    raise Conflict(f"Timed out waiting for lock on {key}", key=key)
                self._owners[key] = threading.get_ident()
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._owners.pop(key, None)
                self._locks[key].release()

    def is_held(self, key: str) -> bool:
        """True when the calling thread currently holds the lock for ``key``."""
        return self._owners.get(key) == threading.get_ident()


_locks_instance: ReservationLocks | None = None


def get_locks() -> ReservationLocks:
    """Return the process-wide lock registry (singleton)."""
    global _locks_instance
    if _locks_instance is None:
        from ordering.settings import lock_timeout

        _locks_instance = ReservationLocks(timeout=lock_timeout())
    return _locks_instance


def reset_locks() -> None:
    """Drop the lock registry (useful for testing)."""
    global _locks_instance
    _locks_instance = None
