"""Material registration: command and handler.

Seeds the ledger with a listing published by the catalogue service.
"""

from protean import handle
from protean.fields import Float, Identifier, String

from ordering.domain import ordering
from ordering.ledger.ledger import InventoryLedger
from ordering.ledger.material import Material, MaterialUnit


@ordering.command(part_of="Material")
class RegisterMaterial:
    material_id = Identifier()
    seller_id = Identifier(required=True)
    title = String(max_length=255)
    available_quantity = Float(required=True)
    unit = String(max_length=10, default=MaterialUnit.KILOGRAMS.value)


@ordering.command_handler(part_of=Material)
class RegisterMaterialHandler:
    @handle(RegisterMaterial)
    def register_material(self, command):
        material = Material.register(
            seller_id=command.seller_id,
            available_quantity=command.available_quantity,
            unit=command.unit,
            title=command.title,
            material_id=command.material_id,
        )
        InventoryLedger().add(material)
        return str(material.id)
