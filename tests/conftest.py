from __future__ import annotations

import pytest

from pouchsim.trace import close_replay_trace
from pouchsim.items import ItemCatalog, ItemType


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("POUCHSIM_SLOT_CAPACITY", raising=False)
    monkeypatch.delenv("POUCHSIM_TRACE_DIR", raising=False)
    close_replay_trace()


@pytest.fixture
def catalog() -> ItemCatalog:
    items = ItemCatalog()
    items.register("apple", ItemType.MATERIAL, max_stack=5)
    items.register("banana", ItemType.MATERIAL, max_stack=5)
    items.register("sword", ItemType.WEAPON, max_stack=1)
    items.register("axe", ItemType.WEAPON, max_stack=1)
    items.register("bow", ItemType.BOW, max_stack=1)
    items.register("shield", ItemType.SHIELD, max_stack=1)
    items.register("arrow", ItemType.ARROW, max_stack=999)
    items.register("firearrow", ItemType.ARROW, max_stack=999)
    items.register("slate", ItemType.KEY_ITEM, max_stack=1)
    items.register("orb", ItemType.KEY_ITEM, max_stack=999)
    return items
