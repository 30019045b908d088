from __future__ import annotations

from collections.abc import Iterable

from .gamedata import GameData
from .inventory import MaterializedInventory
from .items import DEFAULT_CATALOG, Item, ItemCatalog, ItemStack
from .slots import SlotArray


class SimulationState:
    """One game session: the pouch, its flag-store copy and the save files."""

    def __init__(self, *, catalog: ItemCatalog | None = None, capacity: int | None = None) -> None:
        self._catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self._capacity = capacity
        self.inventory = self._new_inventory()
        self.game_data = GameData.empty(catalog=self._catalog, capacity=self._capacity)
        self.manual_save: GameData | None = None
        self.named_saves: dict[str, GameData] = {}
        self.next_reload_name: str | None = None
        self.on_eventide = False

    @property
    def catalog(self) -> ItemCatalog:
        return self._catalog

    def _new_inventory(self) -> MaterializedInventory:
        return MaterializedInventory(SlotArray(catalog=self._catalog, capacity=self._capacity), 0)

    def deep_clone(self) -> SimulationState:
        clone = SimulationState.__new__(SimulationState)
        clone._catalog = self._catalog
        clone._capacity = self._capacity
        clone.inventory = self.inventory.deep_clone()
        clone.game_data = self.game_data.deep_clone()
        clone.manual_save = self.manual_save.deep_clone() if self.manual_save is not None else None
        clone.named_saves = {name: save.deep_clone() for name, save in self.named_saves.items()}
        clone.next_reload_name = self.next_reload_name
        clone.on_eventide = self.on_eventide
        return clone

    def initialize(self, stacks: Iterable[ItemStack]) -> None:
        self.inventory = self._new_inventory()
        self.on_eventide = False
        slots = self.inventory.slots
        for stack in stacks:
            if self._catalog.get(stack.item).stackable:
                self.inventory.add_directly(stack)
                continue
            # One slot per unit, stopping once the pouch is full.
            room = slots.capacity - len(slots)
            for _ in range(min(max(0, int(stack.count)), room)):
                self.inventory.add_directly(ItemStack(item=stack.item, count=1))
        self.inventory.reset_count()
        self.sync_game_data()

    def save(self, name: str | None = None) -> None:
        if self.on_eventide:
            return
        snapshot = self.game_data.deep_clone()
        if name is None:
            self.manual_save = snapshot
        else:
            self.named_saves[name] = snapshot

    def _resolve_save(self, name: str | None) -> GameData | None:
        if name is not None:
            return self.named_saves.get(name)
        if self.next_reload_name is not None:
            pending, self.next_reload_name = self.next_reload_name, None
            return self.named_saves.get(pending)
        return self.manual_save

    def _load(self, data: GameData) -> None:
        self.game_data = data.deep_clone()
        self.inventory.clear_for_reload()
        self.game_data.add_all_to_inventory_on_reload(self.inventory)
        self.inventory.update_equipment_durability(self.game_data)

    def reload(self, name: str | None = None) -> None:
        save = self._resolve_save(name)
        if save is None:
            return
        self._load(save)
        self.on_eventide = False

    def use_save_for_next_reload(self, name: str) -> None:
        self.next_reload_name = name

    def break_slots(self, count: int) -> None:
        self.inventory.modify_count(-int(count))

    def obtain(self, item: Item, count: int) -> None:
        self.inventory.add_in_game(item, count)
        self.sync_game_data()

    def remove(self, item: Item, count: int, slot: int) -> None:
        self.inventory.remove(item, count, slot)
        self.sync_game_data()

    def equip(self, item: Item, slot: int) -> None:
        self.inventory.equip(item, slot)
        self.sync_game_data()

    def unequip(self, item: Item, slot: int) -> None:
        self.inventory.unequip(item, slot)
        self.sync_game_data()

    def shoot_arrow(self, count: int) -> None:
        self.inventory.shoot_arrow(count, self.game_data)

    def close_game(self) -> None:
        self.inventory = self._new_inventory()
        self.game_data = GameData.empty(catalog=self._catalog, capacity=self._capacity)
        self.on_eventide = False

    def sync_game_data(self) -> None:
        if self.on_eventide:
            return
        self.game_data.sync_with(self.inventory)

    def set_eventide(self, enter: bool) -> None:
        enter = bool(enter)
        if enter == self.on_eventide:
            return
        if enter:
            self.inventory.clear_for_eventide()
            self.on_eventide = True
            return
        # Leaving the island restores the pouch from the untouched flag store.
        self.on_eventide = False
        self._load(self.game_data)
