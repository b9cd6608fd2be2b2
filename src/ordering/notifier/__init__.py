"""Notifier adapter registry.

Provides get_notifier() / set_notifier() to swap implementations:
- FakeNotifier for development and testing (default)
- LogNotifier for deployments without a delivery channel

Select with the NOTIFIER_ADAPTER environment variable ("fake" or "log").
"""

from ordering.notifier.port import NotifierPort

_current_notifier: NotifierPort | None = None


def get_notifier() -> NotifierPort:
    """Return the configured notifier (singleton)."""
    global _current_notifier
    if _current_notifier is None:
        from ordering.settings import notifier_adapter

        adapter = notifier_adapter()
        if adapter == "fake":
            from ordering.notifier.fake_adapter import FakeNotifier

            _current_notifier = FakeNotifier()
        elif adapter == "log":
            from ordering.notifier.log_adapter import LogNotifier

            _current_notifier = LogNotifier()
        else:
            raise ValueError(f"Unknown notifier adapter: {adapter}")
    return _current_notifier


def set_notifier(notifier: NotifierPort) -> None:
    """Override the active notifier (useful for tests)."""
    global _current_notifier
    _current_notifier = notifier


def reset_notifier() -> None:
    """Reset to the configured default notifier."""
    global _current_notifier
    _current_notifier = None
