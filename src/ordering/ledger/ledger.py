"""Inventory Ledger: locked reads and writes of material availability.

Every method runs inside the caller's unit of work, so a decrement lands or
vanishes together with the order row written next to it.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.errors import MaterialNotFound
from ordering.ledger.locks import ReservationLocks, get_locks, material_key
from ordering.ledger.material import Material


class InventoryLedger:
    def __init__(self, locks: ReservationLocks | None = None):
        self.locks = locks or get_locks()

    @property
    def _repo(self):
        return current_domain.repository_for(Material)

    def get(self, material_id) -> Material:
        """Unlocked read, for informational lookups only."""
        try:
            return self._repo.get(str(material_id))
        except ObjectNotFoundError as exc:
            raise MaterialNotFound(f"Material {material_id} not found", material_id=str(material_id)) from exc

    def get_for_reservation(self, material_id) -> Material:
        """Read a material while holding its reservation lock.

        The returned aggregate exposes ``available_quantity``, ``seller_id`` and
        ``unit`` as they stand for the lifetime of the lock.
        """
        if not self.locks.is_held(material_key(material_id)):
            raise RuntimeError(f"Reservation lock for material {material_id} is not held by this thread")
        return self.get(material_id)

    def decrement(self, material: Material, amount, order_id) -> Material:
        """Reduce availability by ``amount``; fails with ``InsufficientQuantity``."""
        material.reserve(amount, order_id=order_id)
        self._repo.add(material)
        return material

    def restock(self, material: Material, amount, order_id) -> Material:
        material.restock(amount, order_id=order_id)
        self._repo.add(material)
        return material

    def add(self, material: Material) -> Material:
        self._repo.add(material)
        return material
