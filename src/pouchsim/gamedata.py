from __future__ import annotations

from .inventory import MaterializedInventory
from .items import ItemCatalog, ItemType
from .slots import SlotArray


class GameData:
    """Flag-store copy of the pouch.

    This is what a save captures and what a reload reads back. It only follows
    the pouch when explicitly synced, so the two can drift apart.
    """

    def __init__(self, slots: SlotArray | None = None, durability: dict[int, int] | None = None) -> None:
        self._slots = slots if slots is not None else SlotArray()
        self._durability: dict[int, int] = dict(durability or {})

    @classmethod
    def empty(cls, *, catalog: ItemCatalog | None = None, capacity: int | None = None) -> GameData:
        return cls(SlotArray(catalog=catalog, capacity=capacity))

    @property
    def slots(self) -> SlotArray:
        return self._slots

    @property
    def durability(self) -> dict[int, int]:
        return self._durability

    def deep_clone(self) -> GameData:
        return GameData(self._slots.deep_clone(), self._durability)

    def update_durability(self, value: int, slot_index: int) -> None:
        slot_index = int(slot_index)
        value = int(value)
        self._durability[slot_index] = value
        if not 0 <= slot_index < len(self._slots):
            return
        entry = self._slots[slot_index]
        # Arrow counts are stored in the durability field.
        if self._slots.catalog.get(entry.item).type != ItemType.ARROW:
            return
        if value <= 0:
            del self._slots.entries[slot_index]
            del self._durability[slot_index]
            return
        entry.count = value

    def sync_with(self, inventory: MaterializedInventory) -> None:
        self._slots = inventory.slots.deep_clone()
        self._durability.clear()

    def add_all_to_inventory_on_reload(self, inventory: MaterializedInventory) -> None:
        for entry in self._slots:
            inventory.add_when_reload(entry.item, entry.count, entry.equipped)
