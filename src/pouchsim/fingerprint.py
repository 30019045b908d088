from __future__ import annotations

import hashlib
import struct

from .inventory import MaterializedInventory
from .slots import SlotArray

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_I32 = struct.Struct("<i")


def _h_u8(h: "hashlib._Hash", value: int) -> None:
    h.update(_U8.pack(int(value) & 0xFF))


def _h_u16(h: "hashlib._Hash", value: int) -> None:
    h.update(_U16.pack(int(value) & 0xFFFF))


def _h_i32(h: "hashlib._Hash", value: int) -> None:
    raw = int(value) & 0xFFFF_FFFF
    if raw & 0x8000_0000:
        raw -= 0x1_0000_0000
    h.update(_I32.pack(int(raw)))


def _h_str(h: "hashlib._Hash", value: str) -> None:
    raw = str(value).encode("utf-8")
    _h_u16(h, len(raw))
    h.update(raw)


def _hash_slots(h: "hashlib._Hash", slots: SlotArray) -> None:
    _h_u16(h, len(slots))
    for entry in slots:
        _h_str(h, entry.item)
        _h_i32(h, int(entry.count))
        _h_u8(h, 1 if entry.equipped else 0)


def fingerprint_slots(slots: SlotArray) -> int:
    h = hashlib.blake2b(digest_size=8)
    _hash_slots(h, slots)
    return int.from_bytes(h.digest(), "little")


def fingerprint_inventory(inventory: MaterializedInventory) -> int:
    """Return a stable 64-bit digest of the pouch.

    Covers slot order, items, counts, equipped flags and the loaded-slot count, so
    two replays that only differ in where a break left the boundary still differ.
    """

    h = hashlib.blake2b(digest_size=8)
    _h_i32(h, inventory.count)
    _hash_slots(h, inventory.slots)
    return int.from_bytes(h.digest(), "little")
