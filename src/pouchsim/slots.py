from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .config import resolve_slot_capacity
from .items import DEFAULT_CATALOG, Item, ItemCatalog, ItemStack, ItemType

NO_SLOT = -1


@dataclass(slots=True)
class Slot:
    item: Item
    count: int
    equipped: bool = False

    def copy(self) -> Slot:
        return Slot(item=self.item, count=int(self.count), equipped=bool(self.equipped))


class SlotArray:
    """Ordered pouch slot storage and the item placement rules.

    Slot identity is its index. Every deletion compacts the list, so callers must
    re-resolve indices after any operation that can remove a slot.
    """

    def __init__(
        self,
        slots: Iterable[Slot] = (),
        *,
        catalog: ItemCatalog | None = None,
        capacity: int | None = None,
    ) -> None:
        self._catalog = catalog if catalog is not None else DEFAULT_CATALOG
        resolved = resolve_slot_capacity() if capacity is None else int(capacity)
        if resolved < 1:
            raise ValueError(f"slot capacity must be positive, got {capacity}")
        self._capacity = resolved
        self._slots: list[Slot] = [slot.copy() for slot in slots]

    @property
    def catalog(self) -> ItemCatalog:
        return self._catalog

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def entries(self) -> list[Slot]:
        return self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[Slot]:
        return iter(self._slots)

    def __getitem__(self, index: int) -> Slot:
        return self._slots[index]

    def snapshot(self) -> list[Slot]:
        return [slot.copy() for slot in self._slots]

    def deep_clone(self) -> SlotArray:
        return SlotArray(self._slots, catalog=self._catalog, capacity=self._capacity)

    def _item_type(self, item: Item) -> ItemType:
        return self._catalog.get(item).type

    def _find(self, item: Item, slot: int) -> int:
        if 0 <= int(slot) < len(self._slots) and self._slots[int(slot)].item == item:
            return int(slot)
        for idx, entry in enumerate(self._slots):
            if entry.item == item:
                return idx
        return NO_SLOT

    def add_stack_directly(self, stack: ItemStack) -> int:
        """Initialization path: merge into the first matching stack or append one slot.

        Counts are clamped to the item's max stack and units past it are dropped,
        as is a new slot once the array is at capacity. Returns the number of
        slots created (0 or 1).
        """

        count = int(stack.count)
        if count <= 0:
            return 0
        data = self._catalog.get(stack.item)
        if data.stackable:
            for entry in self._slots:
                if entry.item == stack.item:
                    entry.count = min(entry.count + count, data.max_stack)
                    return 0
        if len(self._slots) >= self._capacity:
            return 0
        self._slots.append(Slot(item=stack.item, count=min(count, data.max_stack)))
        return 1

    def add(
        self,
        item: Item,
        count: int,
        *,
        equipped_during_reload: bool = False,
        reloading: bool = False,
        visible_count: int = 0,
    ) -> int:
        """Place `count` units: fill partial stacks first, then append new slots.

        While reloading, only the first `visible_count` slots are merge candidates.
        Slots past that boundary are left over from a slot break and the loader
        does not see them, so loaded stacks land in fresh slots instead.

        Returns the number of slots created. Merges never count.
        """

        remaining = int(count)
        if remaining <= 0:
            return 0
        data = self._catalog.get(item)
        mark_equipped = bool(equipped_during_reload) and bool(reloading)

        if data.stackable:
            limit = len(self._slots)
            if reloading:
                limit = max(0, min(int(visible_count), limit))
            for idx in range(limit):
                if remaining <= 0:
                    break
                entry = self._slots[idx]
                if entry.item != item:
                    continue
                room = data.max_stack - entry.count
                if room <= 0:
                    continue
                moved = min(room, remaining)
                entry.count += moved
                remaining -= moved
                if mark_equipped:
                    entry.equipped = True
                    mark_equipped = False

        created = 0
        while remaining > 0 and len(self._slots) < self._capacity:
            moved = min(remaining, data.max_stack)
            self._slots.append(Slot(item=item, count=moved, equipped=mark_equipped))
            mark_equipped = False
            remaining -= moved
            created += 1
        return created

    def remove(self, item: Item, count: int, slot: int = 0) -> int:
        """Remove `count` units of `item`, preferring `slot`.

        When `slot` cannot cover the whole request on its own, units are taken from
        every matching slot in index order instead. Emptied slots are deleted along
        with their equipped flag. Returns the number of slots deleted.
        """

        remaining = int(count)
        if remaining <= 0:
            return 0

        slot = int(slot)
        if 0 <= slot < len(self._slots):
            target = self._slots[slot]
            if target.item == item and target.count >= remaining:
                target.count -= remaining
                if target.count <= 0:
                    del self._slots[slot]
                    return 1
                return 0

        removed = 0
        idx = 0
        while remaining > 0 and idx < len(self._slots):
            entry = self._slots[idx]
            if entry.item != item:
                idx += 1
                continue
            taken = min(entry.count, remaining)
            entry.count -= taken
            remaining -= taken
            if entry.count <= 0:
                del self._slots[idx]
                removed += 1
                continue
            idx += 1
        return removed

    def equip(self, item: Item, slot: int = 0) -> None:
        data = self._catalog.get(item)
        if not data.equippable:
            return
        index = self._find(item, slot)
        if index == NO_SLOT:
            return
        for idx, entry in enumerate(self._slots):
            if idx != index and entry.equipped and self._item_type(entry.item) == data.type:
                entry.equipped = False
        self._slots[index].equipped = True

    def unequip(self, item: Item, slot: int = 0) -> None:
        index = self._find(item, slot)
        if index == NO_SLOT:
            return
        self._slots[index].equipped = False

    def clear_first(self, count: int) -> int:
        count = max(0, min(int(count), len(self._slots)))
        del self._slots[:count]
        return count

    def shoot_arrow(self, count: int) -> int:
        """Spend arrows from the first equipped arrow stack.

        Returns the index of the slot that changed, or `NO_SLOT` when no arrows
        are equipped. A stack that runs out is deleted; the returned index is
        where it stood.
        """

        count = int(count)
        if count <= 0:
            return NO_SLOT
        for idx, entry in enumerate(self._slots):
            if not entry.equipped or self._item_type(entry.item) != ItemType.ARROW:
                continue
            entry.count -= count
            if entry.count <= 0:
                del self._slots[idx]
            return idx
        return NO_SLOT

    def clear_all_but_key_items(self) -> int:
        kept = [entry for entry in self._slots if self._item_type(entry.item) == ItemType.KEY_ITEM]
        removed = len(self._slots) - len(kept)
        self._slots[:] = kept
        return removed


__all__ = [
    "NO_SLOT",
    "Slot",
    "SlotArray",
]
