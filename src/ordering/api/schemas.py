"""Pydantic request/response schemas for the Transactions API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "material_id": "5b0f6a52-4d1e-4c4b-9a43-0c1f3c2b7a10",
                    "quantity": 25.5,
                    "total_amount": 318.75,
                    "currency": "EUR",
                }
            ]
        }
    }

    material_id: str = Field(..., max_length=255)
    quantity: float = Field(..., gt=0)
    total_amount: float = Field(..., gt=0)
    currency: str = Field(..., min_length=3, max_length=3)


class UpdateStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "confirmed"}]}}

    status: str


class RegisterMaterialRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "material_id": "5b0f6a52-4d1e-4c4b-9a43-0c1f3c2b7a10",
                    "seller_id": "seller-001",
                    "title": "Organic cotton jersey offcuts",
                    "available_quantity": 120.0,
                    "unit": "kg",
                }
            ]
        }
    }

    material_id: str | None = Field(None, max_length=255)
    seller_id: str = Field(..., max_length=255)
    title: str | None = Field(None, max_length=255)
    available_quantity: float = Field(..., ge=0)
    unit: str = "kg"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderResponse(BaseModel):
    id: str
    material_id: str
    material_title: str | None = None
    buyer_id: str
    seller_id: str
    quantity: float
    total_amount: float
    currency: str
    unit: str
    status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(**order.to_summary())


class MaterialResponse(BaseModel):
    id: str
    seller_id: str
    title: str | None = None
    available_quantity: float
    unit: str

    @classmethod
    def from_material(cls, material) -> "MaterialResponse":
        return cls(
            id=str(material.id),
            seller_id=str(material.seller_id),
            title=material.title,
            available_quantity=material.available_quantity,
            unit=material.unit,
        )
