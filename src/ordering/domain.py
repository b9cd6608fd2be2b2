"""Ordering bounded context: Material Ledger and Order Engine.

Reserves finite material inventory against concurrent buyers, records the
order history, and drives orders through their delivery lifecycle.
"""

from protean.domain import Domain

from ordering.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
