"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state. State tracks entity IDs
returned by creation endpoints so follow-up operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class MaterialState:
    """Tracks a material listed by a simulated seller."""

    material_id: str | None = None
    seller_id: str | None = None
    listed_quantity: float = 0.0


@dataclass
class OrderState:
    """Tracks state for a single order lifecycle."""

    order_id: str | None = None
    buyer_id: str | None = None
    current_status: str = "pending"
    placed: list[str] = field(default_factory=list)
