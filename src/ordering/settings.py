"""Engine settings read from the environment.

Storage, brokers and event processing are configured by Protean through
``domain.toml``; these knobs cover what Protean does not.
"""

import os

_TRUTHY = {"1", "true", "yes", "on"}


def lock_timeout() -> float:
    """Seconds to wait for a reservation or order lock."""
    return float(os.environ.get("ORDER_LOCK_TIMEOUT", "10"))


def restore_inventory_on_cancel() -> bool:
    """Whether cancelling an order returns its quantity to the material."""
    return os.environ.get("RESTORE_INVENTORY_ON_CANCEL", "true").strip().lower() in _TRUTHY


def notifier_adapter() -> str:
    return os.environ.get("NOTIFIER_ADAPTER", "fake")


def notifier_max_workers() -> int:
    return int(os.environ.get("NOTIFIER_MAX_WORKERS", "4"))
