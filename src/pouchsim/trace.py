from __future__ import annotations

import datetime as dt
import os
from pathlib import Path
from threading import Lock

import msgspec

TRACE_FORMAT_VERSION = 1


class TraceError(ValueError):
    pass


class ReplayStep(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """What one command did to the pouch, as seen right after it ran."""

    index: int
    kind: str
    valid: bool
    display: str
    slot_count: int
    visible_count: int
    fingerprint: int


class _TraceOpenRow(msgspec.Struct, tag="open", tag_field="event", forbid_unknown_fields=True):
    label: str
    pid: int
    started_at: str
    format_version: int = TRACE_FORMAT_VERSION


class _TraceStepRow(msgspec.Struct, tag="step", tag_field="event", forbid_unknown_fields=True):
    step: ReplayStep


_TraceRow = _TraceOpenRow | _TraceStepRow

_ROW_ENCODER = msgspec.json.Encoder()
_ROW_DECODER = msgspec.json.Decoder(type=_TraceRow)


class ReplayTrace:
    """Append-only JSON-lines file with one row per replayed command."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _write(self, row: _TraceRow) -> None:
        line = _ROW_ENCODER.encode(row) + b"\n"
        with self._lock, self._path.open("ab") as handle:
            handle.write(line)

    def write_step(self, step: ReplayStep) -> None:
        self._write(_TraceStepRow(step=step))


_ACTIVE_LOCK = Lock()
_ACTIVE: ReplayTrace | None = None


def open_replay_trace(*, base_dir: Path, label: str = "replay") -> ReplayTrace:
    """Start a trace under `<base_dir>/logs/` and make it the active one."""
    label_name = str(label).strip().lower() or "replay"
    started = dt.datetime.now(dt.timezone.utc)
    pid = int(os.getpid())
    path = Path(base_dir) / "logs" / f"{label_name}-pid{pid}-{started:%Y%m%dT%H%M%S.%fZ}.jsonl"
    path.parent.mkdir(parents=True, exist_ok=True)

    trace = ReplayTrace(path)
    trace._write(_TraceOpenRow(label=label_name, pid=pid, started_at=started.isoformat(timespec="milliseconds")))

    global _ACTIVE
    with _ACTIVE_LOCK:
        _ACTIVE = trace
    return trace


def active_replay_trace() -> ReplayTrace | None:
    with _ACTIVE_LOCK:
        return _ACTIVE


def trace_step(step: ReplayStep) -> None:
    trace = active_replay_trace()
    if trace is not None:
        trace.write_step(step)


def close_replay_trace() -> None:
    global _ACTIVE
    with _ACTIVE_LOCK:
        _ACTIVE = None


def load_replay_trace(path: Path) -> list[ReplayStep]:
    """Read back the steps of a trace file, checking its header row."""
    path = Path(path)
    steps: list[ReplayStep] = []
    opened = False
    for lineno, raw_line in enumerate(path.read_bytes().splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            row = _ROW_DECODER.decode(line)
        except (msgspec.DecodeError, msgspec.ValidationError) as exc:
            raise TraceError(f"invalid trace row at {path}:{lineno}") from exc
        if isinstance(row, _TraceOpenRow):
            if row.format_version != TRACE_FORMAT_VERSION:
                raise TraceError(f"unsupported trace format version {row.format_version} in {path}")
            opened = True
            continue
        if not opened:
            raise TraceError(f"trace has no header row: {path}")
        steps.append(row.step)
    if not opened:
        raise TraceError(f"trace has no header row: {path}")
    return steps
