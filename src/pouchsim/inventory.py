from __future__ import annotations

from typing import Protocol

from .items import DURABILITY_TYPES, Item, ItemStack, ItemType
from .slots import NO_SLOT, SlotArray

# Durability written for equipment after a reload; the value only has to be nonzero.
RELOAD_EQUIPMENT_DURABILITY = 999


class DurabilitySink(Protocol):
    def update_durability(self, value: int, slot_index: int) -> None: ...


class MaterializedInventory:
    """Player-facing view over a `SlotArray`.

    `count` is how many leading slots the game currently treats as loaded. A
    slot break pushes it below `len(slots)`; the slots past the boundary are
    skipped by the next reload's clear and merge.
    """

    def __init__(self, slots: SlotArray | None = None, count: int = 0) -> None:
        self._slots = slots if slots is not None else SlotArray()
        self._count = int(count)

    @property
    def slots(self) -> SlotArray:
        return self._slots

    @property
    def count(self) -> int:
        return self._count

    def deep_clone(self) -> MaterializedInventory:
        return MaterializedInventory(self._slots.deep_clone(), self._count)

    def add_directly(self, stack: ItemStack) -> None:
        self._count += self._slots.add_stack_directly(stack)

    def add_when_reload(self, item: Item, count: int, equipped_during_reload: bool) -> None:
        self._count += self._slots.add(
            item,
            count,
            equipped_during_reload=equipped_during_reload,
            reloading=True,
            visible_count=self._count,
        )

    def add_in_game(self, item: Item, count: int) -> None:
        self._count += self._slots.add(item, count, visible_count=self._count)

    def remove(self, item: Item, count: int, slot: int) -> None:
        self._count -= self._slots.remove(item, count, slot)

    def equip(self, item: Item, slot: int) -> None:
        self._slots.equip(item, slot)

    def unequip(self, item: Item, slot: int) -> None:
        self._slots.unequip(item, slot)

    def clear_for_reload(self) -> None:
        # Only the loaded prefix is cleared; slots past a break survive the reload.
        if self._count > 0:
            self._slots.clear_first(self._count)
            self._count = 0

    def update_equipment_durability(self, mirror: DurabilitySink) -> None:
        found: set[ItemType] = set()
        for idx, entry in enumerate(self._slots):
            if not entry.equipped:
                continue
            item_type = self._slots.catalog.get(entry.item).type
            if item_type not in DURABILITY_TYPES or item_type in found:
                continue
            mirror.update_durability(RELOAD_EQUIPMENT_DURABILITY, idx)
            found.add(item_type)

    def shoot_arrow(self, count: int, mirror: DurabilitySink) -> None:
        before = len(self._slots)
        updated = self._slots.shoot_arrow(count)
        if updated == NO_SLOT:
            return
        if len(self._slots) < before:
            # An emptied stack is deleted; the mirror hears a count of zero.
            self._count -= 1
            mirror.update_durability(0, updated)
            return
        mirror.update_durability(self._slots[updated].count, updated)

    def get_count(self) -> int:
        return self._count

    def modify_count(self, delta: int) -> None:
        self._count += int(delta)

    def reset_count(self) -> None:
        self._count = len(self._slots)

    def clear_for_eventide(self) -> None:
        self._count -= self._slots.clear_all_but_key_items()
