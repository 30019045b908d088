from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from typing import TypeAlias

Item: TypeAlias = str

DEFAULT_MAX_STACK = 999


class ItemCatalogError(ValueError):
    pass


class ItemType(IntEnum):
    """Pouch item classes, in tab order."""

    WEAPON = 0
    BOW = 1
    ARROW = 2
    SHIELD = 3
    MATERIAL = 4
    MEAL = 5
    KEY_ITEM = 6


# Only these classes carry an equipped flag; at most one slot per class may hold it.
EQUIP_TYPES: frozenset[ItemType] = frozenset({ItemType.WEAPON, ItemType.BOW, ItemType.ARROW, ItemType.SHIELD})

# Equipment whose durability is refreshed after a reload.
DURABILITY_TYPES: tuple[ItemType, ...] = (ItemType.WEAPON, ItemType.BOW, ItemType.SHIELD)


@dataclass(frozen=True, slots=True)
class ItemStack:
    item: Item
    count: int


@dataclass(frozen=True, slots=True)
class ItemData:
    item: Item
    type: ItemType
    max_stack: int = DEFAULT_MAX_STACK

    @property
    def stackable(self) -> bool:
        return int(self.max_stack) > 1

    @property
    def equippable(self) -> bool:
        return self.type in EQUIP_TYPES


def _stackable(item: Item, item_type: ItemType) -> ItemData:
    return ItemData(item=item, type=item_type, max_stack=DEFAULT_MAX_STACK)


def _single(item: Item, item_type: ItemType) -> ItemData:
    return ItemData(item=item, type=item_type, max_stack=1)


DEFAULT_ITEMS: tuple[ItemData, ...] = (
    _single("Slate", ItemType.KEY_ITEM),
    _single("Glider", ItemType.KEY_ITEM),
    _stackable("SpiritOrb", ItemType.KEY_ITEM),
    _stackable("KorokSeed", ItemType.KEY_ITEM),
    _single("TravelersSword", ItemType.WEAPON),
    _single("SoldiersBroadsword", ItemType.WEAPON),
    _single("BoxingGloves", ItemType.WEAPON),
    _single("Axe", ItemType.WEAPON),
    _single("MasterSword", ItemType.WEAPON),
    _single("TravelersBow", ItemType.BOW),
    _single("SoldiersBow", ItemType.BOW),
    _single("OlderBow", ItemType.BOW),
    _stackable("NormalArrow", ItemType.ARROW),
    _stackable("FireArrow", ItemType.ARROW),
    _stackable("IceArrow", ItemType.ARROW),
    _stackable("ShockArrow", ItemType.ARROW),
    _stackable("BombArrow", ItemType.ARROW),
    _single("PotLid", ItemType.SHIELD),
    _single("TravelersShield", ItemType.SHIELD),
    _single("HylianShield", ItemType.SHIELD),
    _stackable("Apple", ItemType.MATERIAL),
    _stackable("Diamond", ItemType.MATERIAL),
    _stackable("Shroom", ItemType.MATERIAL),
    _stackable("SpeedFood", ItemType.MATERIAL),
    _stackable("Lotus", ItemType.MATERIAL),
    _stackable("Screw", ItemType.MATERIAL),
    _stackable("Amber", ItemType.MATERIAL),
    _stackable("Fairy", ItemType.MATERIAL),
    _stackable("Heart", ItemType.MATERIAL),
    _stackable("Core", ItemType.MATERIAL),
    _single("SteamedFruit", ItemType.MEAL),
    _single("MushroomSkewer", ItemType.MEAL),
)


class ItemCatalog:
    """Item name -> classification and stack limit.

    Lookups never fail: an unregistered name resolves to a stackable material so a
    log naming unknown items still replays.
    """

    def __init__(self, items: Iterable[ItemData] = ()) -> None:
        self._items: dict[Item, ItemData] = {}
        for data in items:
            self._add(data)

    def _add(self, data: ItemData) -> None:
        if int(data.max_stack) < 1:
            raise ItemCatalogError(f"max_stack must be at least 1 for {data.item!r}, got {data.max_stack}")
        self._items[str(data.item)] = data

    def register(self, item: Item, item_type: ItemType, *, max_stack: int = DEFAULT_MAX_STACK) -> ItemData:
        data = ItemData(item=str(item), type=ItemType(item_type), max_stack=int(max_stack))
        self._add(data)
        return data

    def get(self, item: Item) -> ItemData:
        data = self._items.get(item)
        if data is None:
            return ItemData(item=item, type=ItemType.MATERIAL, max_stack=DEFAULT_MAX_STACK)
        return data

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __len__(self) -> int:
        return len(self._items)


def default_catalog() -> ItemCatalog:
    return ItemCatalog(DEFAULT_ITEMS)


DEFAULT_CATALOG = default_catalog()
