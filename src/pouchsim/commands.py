from __future__ import annotations

from collections.abc import Iterable
from typing import TypeAlias

import msgspec

from .items import ItemStack
from .state import SimulationState


class Initialize(msgspec.Struct, frozen=True, tag_field="kind", tag="initialize"):
    stacks: tuple[ItemStack, ...] = ()


class Save(msgspec.Struct, frozen=True, tag_field="kind", tag="save"):
    pass


class SaveAs(msgspec.Struct, frozen=True, tag_field="kind", tag="save_as"):
    name: str = ""


class Reload(msgspec.Struct, frozen=True, tag_field="kind", tag="reload"):
    name: str | None = None


class Use(msgspec.Struct, frozen=True, tag_field="kind", tag="use"):
    """Deprecated: pick the save used by the next plain reload."""

    name: str = ""


class BreakSlots(msgspec.Struct, frozen=True, tag_field="kind", tag="break_slots"):
    count: int = 0


class Add(msgspec.Struct, frozen=True, tag_field="kind", tag="add"):
    verb: str = "Get"
    count: int = 1
    item: str = ""


class AddWithoutCount(msgspec.Struct, frozen=True, tag_field="kind", tag="add_without_count"):
    verb: str = "Get"
    item: str = ""


class AddMultiple(msgspec.Struct, frozen=True, tag_field="kind", tag="add_multiple"):
    verb: str = "Get"
    stacks: tuple[ItemStack, ...] = ()


class Remove(msgspec.Struct, frozen=True, tag_field="kind", tag="remove"):
    verb: str = "Remove"
    count: int = 1
    item: str = ""
    slot: int = 0
    no_slot: bool = True


class RemoveWithoutCount(msgspec.Struct, frozen=True, tag_field="kind", tag="remove_without_count"):
    verb: str = "Remove"
    item: str = ""
    slot: int = 0
    no_slot: bool = True


class RemoveMultiple(msgspec.Struct, frozen=True, tag_field="kind", tag="remove_multiple"):
    verb: str = "Remove"
    stacks: tuple[ItemStack, ...] = ()


class DropAndPickup(msgspec.Struct, frozen=True, tag_field="kind", tag="drop_and_pickup"):
    stacks: tuple[ItemStack, ...] = ()


class Equip(msgspec.Struct, frozen=True, tag_field="kind", tag="equip"):
    item: str = ""
    slot: int = 0
    no_slot: bool = True


class Unequip(msgspec.Struct, frozen=True, tag_field="kind", tag="unequip"):
    item: str = ""
    slot: int = 0
    no_slot: bool = True


class ShootArrow(msgspec.Struct, frozen=True, tag_field="kind", tag="shoot_arrow"):
    count: int = 1


class CloseGame(msgspec.Struct, frozen=True, tag_field="kind", tag="close_game"):
    pass


class Sync(msgspec.Struct, frozen=True, tag_field="kind", tag="sync"):
    """Resync the flag store with the pouch; `label` names the in-game action that does it."""

    label: str = "Sync"


class Eventide(msgspec.Struct, frozen=True, tag_field="kind", tag="eventide"):
    enter: bool = True


class Nop(msgspec.Struct, frozen=True, tag_field="kind", tag="nop"):
    text: str = ""


class SortKey(msgspec.Struct, frozen=True, tag_field="kind", tag="sort_key"):
    pass


class SortMaterial(msgspec.Struct, frozen=True, tag_field="kind", tag="sort_material"):
    pass


Command: TypeAlias = (
    Initialize
    | Save
    | SaveAs
    | Reload
    | Use
    | BreakSlots
    | Add
    | AddWithoutCount
    | AddMultiple
    | Remove
    | RemoveWithoutCount
    | RemoveMultiple
    | DropAndPickup
    | Equip
    | Unequip
    | ShootArrow
    | CloseGame
    | Sync
    | Eventide
    | Nop
    | SortKey
    | SortMaterial
)


def command_kind(command: Command) -> str:
    return str(command.__struct_config__.tag)


def command_is_valid(command: Command) -> bool:
    """False for variants kept only so old logs still display."""
    match command:
        case Use() | Nop():
            return False
        case _:
            return True


def execute_command(command: Command, state: SimulationState) -> None:
    match command:
        case Initialize(stacks=stacks):
            state.initialize(stacks)
        case Save():
            state.save()
        case SaveAs(name=name):
            state.save(name)
        case Reload(name=name):
            state.reload(name)
        case Use(name=name):
            state.use_save_for_next_reload(name)
        case BreakSlots(count=count):
            state.break_slots(count)
        case Add(count=count, item=item):
            state.obtain(item, count)
        case AddWithoutCount(item=item):
            state.obtain(item, 1)
        case AddMultiple(stacks=stacks):
            for stack in stacks:
                state.obtain(stack.item, stack.count)
        case Remove(count=count, item=item, slot=slot):
            state.remove(item, count, slot)
        case RemoveWithoutCount(item=item, slot=slot):
            state.remove(item, 1, slot)
        case RemoveMultiple(stacks=stacks):
            for stack in stacks:
                state.remove(stack.item, stack.count, 0)
        case DropAndPickup(stacks=stacks):
            # Each stack is dropped and picked back up before the next one is touched.
            for stack in stacks:
                state.remove(stack.item, stack.count, 0)
                state.obtain(stack.item, stack.count)
        case Equip(item=item, slot=slot):
            state.equip(item, slot)
        case Unequip(item=item, slot=slot):
            state.unequip(item, slot)
        case ShootArrow(count=count):
            state.shoot_arrow(count)
        case CloseGame():
            state.close_game()
        case Sync():
            state.sync_game_data()
        case Eventide(enter=enter):
            state.set_eventide(enter)
        case Nop():
            pass
        case SortKey() | SortMaterial():
            # TODO: sorting needs the per-tab sort order tables before it can move slots.
            pass


def _join_stacks(initial: str, stacks: Iterable[ItemStack]) -> str:
    parts = [initial]
    for stack in stacks:
        parts.append(str(stack.count))
        parts.append(stack.item)
    return " ".join(parts)


def _slot_suffix(preposition: str, slot: int, no_slot: bool) -> str:
    if no_slot:
        return ""
    return f" {preposition} Slot {int(slot) + 1}"


def command_display(command: Command) -> str:
    match command:
        case Initialize(stacks=stacks):
            return _join_stacks("Initialize", stacks)
        case Save():
            return "Save"
        case SaveAs(name=name):
            return f"Save As {name}"
        case Reload(name=name):
            return f"Reload {name}" if name else "Reload"
        case Use(name=name):
            return f"Use {name}"
        case BreakSlots(count=count):
            return f"Break {count} Slots"
        case Add(verb=verb, count=count, item=item):
            return f"{verb} {count} {item}"
        case AddWithoutCount(verb=verb, item=item):
            return f"{verb} {item}"
        case AddMultiple(verb=verb, stacks=stacks) | RemoveMultiple(verb=verb, stacks=stacks):
            return _join_stacks(verb, stacks)
        case Remove(verb=verb, count=count, item=item, slot=slot, no_slot=no_slot):
            return f"{verb} {count} {item}{_slot_suffix('From', slot, no_slot)}"
        case RemoveWithoutCount(verb=verb, item=item, slot=slot, no_slot=no_slot):
            return f"{verb} {item}{_slot_suffix('From', slot, no_slot)}"
        case DropAndPickup(stacks=stacks):
            return _join_stacks("D&P", stacks)
        case Equip(item=item, slot=slot, no_slot=no_slot):
            return f"Equip {item}{_slot_suffix('In', slot, no_slot)}"
        case Unequip(item=item, slot=slot, no_slot=no_slot):
            return f"Unequip {item}{_slot_suffix('In', slot, no_slot)}"
        case ShootArrow(count=count):
            return f"Shoot {count} Arrow"
        case CloseGame():
            return "Close Game"
        case Sync(label=label):
            return label
        case Eventide(enter=enter):
            return f"{'Enter' if enter else 'Exit'} Eventide"
        case Nop(text=text):
            return text
        case SortKey():
            return "Sort Key"
        case SortMaterial():
            return "Sort Material"
    return command_kind(command)


__all__ = [
    "Add",
    "AddMultiple",
    "AddWithoutCount",
    "BreakSlots",
    "CloseGame",
    "Command",
    "DropAndPickup",
    "Equip",
    "Eventide",
    "Initialize",
    "Nop",
    "Reload",
    "Remove",
    "RemoveMultiple",
    "RemoveWithoutCount",
    "Save",
    "SaveAs",
    "ShootArrow",
    "SortKey",
    "SortMaterial",
    "Sync",
    "Unequip",
    "Use",
    "command_display",
    "command_is_valid",
    "command_kind",
    "execute_command",
]
