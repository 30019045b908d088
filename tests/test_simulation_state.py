from __future__ import annotations

from pouchsim.inventory import RELOAD_EQUIPMENT_DURABILITY
from pouchsim.items import ItemCatalog, ItemStack
from pouchsim.slots import Slot
from pouchsim.state import SimulationState


def _state(catalog: ItemCatalog, *stacks: ItemStack) -> SimulationState:
    state = SimulationState(catalog=catalog, capacity=20)
    state.initialize(stacks)
    return state


def test_initialize_splits_unstackable_stacks(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("apple", 3), ItemStack("sword", 2))

    assert list(state.inventory.slots) == [Slot("apple", 3), Slot("sword", 1), Slot("sword", 1)]
    assert state.inventory.count == 3
    assert list(state.game_data.slots) == list(state.inventory.slots)


def test_reload_restores_saved_pouch(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("apple", 3), ItemStack("banana", 2))
    state.save()
    state.obtain("sword", 1)
    state.remove("apple", 3, 0)

    state.reload()

    assert list(state.inventory.slots) == [Slot("apple", 3), Slot("banana", 2)]
    assert state.inventory.count == 2


def test_reload_without_save_is_noop(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("apple", 3))

    state.reload()
    state.reload("missing")

    assert list(state.inventory.slots) == [Slot("apple", 3)]
    assert state.inventory.count == 1


def test_broken_slot_survives_reload_and_duplicates_item(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("apple", 3), ItemStack("sword", 1))
    state.save()
    state.break_slots(1)

    state.reload()

    assert list(state.inventory.slots) == [Slot("sword", 1), Slot("apple", 3), Slot("sword", 1)]
    assert state.inventory.count == 2

    state.reload()

    assert list(state.inventory.slots) == [Slot("sword", 1), Slot("apple", 3), Slot("sword", 1)]
    assert state.inventory.count == 2


def test_close_game_repairs_broken_slots(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("apple", 3), ItemStack("sword", 1))
    state.save()
    state.break_slots(1)
    state.reload()

    state.close_game()
    assert list(state.inventory.slots) == []

    state.reload()
    assert list(state.inventory.slots) == [Slot("apple", 3), Slot("sword", 1)]
    assert state.inventory.count == 2


def test_named_saves_and_use_for_next_reload(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("apple", 1))
    state.save("first")
    state.obtain("banana", 2)
    state.save()

    state.reload("first")
    assert list(state.inventory.slots) == [Slot("apple", 1)]

    state.use_save_for_next_reload("first")
    state.obtain("sword", 1)
    state.reload()
    assert list(state.inventory.slots) == [Slot("apple", 1)]

    state.reload()
    assert list(state.inventory.slots) == [Slot("apple", 1), Slot("banana", 2)]


def test_reload_restores_equipment_and_durability(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("sword", 1), ItemStack("bow", 1))
    state.equip("bow", 1)
    state.save()

    state.reload()

    assert list(state.inventory.slots) == [Slot("sword", 1), Slot("bow", 1, equipped=True)]
    assert state.game_data.durability == {1: RELOAD_EQUIPMENT_DURABILITY}


def test_shoot_arrow_updates_flag_store_without_sync(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("bow", 1), ItemStack("arrow", 10))
    state.equip("arrow", 1)

    state.shoot_arrow(3)

    assert list(state.inventory.slots) == [Slot("bow", 1), Slot("arrow", 7, equipped=True)]
    assert state.game_data.slots[1].count == 7
    assert state.game_data.durability == {1: 7}


def test_eventide_strips_pouch_and_restores_on_exit(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("slate", 1), ItemStack("apple", 3), ItemStack("sword", 1))
    state.save()
    saved = state.manual_save

    state.set_eventide(True)
    assert list(state.inventory.slots) == [Slot("slate", 1)]
    assert state.inventory.count == 1

    state.obtain("apple", 2)
    state.save()
    assert state.manual_save is saved
    assert list(state.game_data.slots) == [Slot("slate", 1), Slot("apple", 3), Slot("sword", 1)]

    state.set_eventide(False)
    assert list(state.inventory.slots) == [Slot("slate", 1), Slot("apple", 3), Slot("sword", 1)]
    assert state.inventory.count == 3
    assert state.on_eventide is False


def test_repeated_eventide_toggle_is_noop(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("slate", 1), ItemStack("apple", 3))

    state.set_eventide(False)
    assert list(state.inventory.slots) == [Slot("slate", 1), Slot("apple", 3)]

    state.set_eventide(True)
    state.obtain("banana", 1)
    state.set_eventide(True)
    assert list(state.inventory.slots) == [Slot("slate", 1), Slot("banana", 1)]


def test_deep_clone_is_isolated(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("apple", 3))
    state.save("a")

    clone = state.deep_clone()
    clone.obtain("sword", 1)
    clone.save("a")
    clone.break_slots(1)

    assert list(state.inventory.slots) == [Slot("apple", 3)]
    assert state.inventory.count == 1
    assert list(state.named_saves["a"].slots) == [Slot("apple", 3)]
    assert list(clone.named_saves["a"].slots) == [Slot("apple", 3), Slot("sword", 1)]


def test_emptied_arrow_stack_stays_gone_after_save_and_reload(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("bow", 1), ItemStack("arrow", 3))
    state.equip("arrow", 1)
    state.save()

    state.shoot_arrow(3)
    assert list(state.game_data.slots) == [Slot("bow", 1)]

    state.save()
    state.reload()

    assert list(state.inventory.slots) == [Slot("bow", 1)]
    assert state.inventory.count == 1


def test_initialize_leaves_eventide(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("slate", 1), ItemStack("apple", 3))
    state.set_eventide(True)

    state.initialize([ItemStack("banana", 2)])
    state.save()
    state.obtain("sword", 1)

    assert state.on_eventide is False
    assert state.manual_save is not None
    assert list(state.manual_save.slots) == [Slot("banana", 2)]
    assert list(state.game_data.slots) == [Slot("banana", 2), Slot("sword", 1)]


def test_initialize_stops_splitting_at_capacity(catalog: ItemCatalog) -> None:
    state = _state(catalog, ItemStack("apple", 3), ItemStack("sword", 10**9), ItemStack("bow", 1))

    assert len(state.inventory.slots) == 20
    assert state.inventory.slots[0] == Slot("apple", 3)
    assert all(entry == Slot("sword", 1) for entry in list(state.inventory.slots)[1:])
    assert state.inventory.count == 20
