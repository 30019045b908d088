from __future__ import annotations

import os
from pathlib import Path

# PauseMenuDataMgr keeps a fixed pool of 420 pouch item records.
DEFAULT_SLOT_CAPACITY = 420

SLOT_CAPACITY_ENV = "POUCHSIM_SLOT_CAPACITY"
TRACE_DIR_ENV = "POUCHSIM_TRACE_DIR"


def resolve_slot_capacity(default_capacity: int = DEFAULT_SLOT_CAPACITY) -> int:
    capacity = max(1, int(default_capacity))
    raw = os.environ.get(SLOT_CAPACITY_ENV)
    if raw is None:
        return capacity
    try:
        return max(1, int(raw))
    except ValueError:
        return capacity


def resolve_trace_dir() -> Path | None:
    raw = os.environ.get(TRACE_DIR_ENV)
    if raw is None:
        return None
    raw = raw.strip()
    if not raw:
        return None
    return Path(raw)
