"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names expected by the API's Pydantic request
schemas and pass the engine's validation rules.
"""

import random
import uuid

from faker import Faker

fake = Faker()

UNITS = ["m", "kg", "yards", "lbs"]
CURRENCIES = ["EUR", "GBP", "USD"]
FIBRES = ["cotton", "linen", "wool", "silk", "hemp", "denim", "jersey", "tweed"]


def user_id(prefix: str) -> str:
    """Generate user IDs like 'buyer-lt-a1b2c3d4'."""
    return f"{prefix}-lt-{uuid.uuid4().hex[:8]}"


def material_data(seller_id: str, quantity: float | None = None) -> dict:
    """Payload for POST /materials."""
    return {
        "seller_id": seller_id,
        "title": f"{fake.color_name()} {random.choice(FIBRES)} offcuts",
        "available_quantity": quantity if quantity is not None else round(random.uniform(20, 200), 1),
        "unit": random.choice(UNITS),
    }


def order_data(material_id: str, quantity: float | None = None) -> dict:
    """Payload for POST /transactions."""
    quantity = quantity if quantity is not None else round(random.uniform(0.5, 5), 1)
    return {
        "material_id": material_id,
        "quantity": quantity,
        "total_amount": round(quantity * random.uniform(3, 40), 2),
        "currency": random.choice(CURRENCIES),
    }
