from __future__ import annotations

from collections.abc import Iterable

from .commands import Command, command_display, command_is_valid, command_kind, execute_command
from .config import resolve_trace_dir
from .fingerprint import fingerprint_inventory
from .items import ItemCatalog
from .state import SimulationState
from .trace import ReplayStep, active_replay_trace, open_replay_trace, trace_step


class ReplayError(ValueError):
    pass


def _ensure_replay_trace() -> None:
    if active_replay_trace() is not None:
        return
    base_dir = resolve_trace_dir()
    if base_dir is None:
        return
    open_replay_trace(base_dir=base_dir, label="replay")


def apply_command(state: SimulationState, command: Command, *, index: int = 0) -> ReplayStep:
    execute_command(command, state)
    inventory = state.inventory
    step = ReplayStep(
        index=int(index),
        kind=command_kind(command),
        valid=command_is_valid(command),
        display=command_display(command),
        slot_count=len(inventory.slots),
        visible_count=inventory.count,
        fingerprint=fingerprint_inventory(inventory),
    )
    trace_step(step)
    return step


def replay_commands(
    commands: Iterable[Command],
    *,
    state: SimulationState | None = None,
    catalog: ItemCatalog | None = None,
) -> SimulationState:
    """Apply `commands` in order and return the resulting state.

    A passed-in `state` is mutated in place.
    """

    if state is None:
        state = SimulationState(catalog=catalog)
    _ensure_replay_trace()
    for idx, command in enumerate(commands):
        apply_command(state, command, index=idx)
    return state


class ReplaySession:
    """A command log with the state after every step kept for inspection.

    Editing the log recomputes only from the edited index onward. Each stored
    state is its own deep copy, so stepping back never sees later mutations.
    """

    def __init__(
        self,
        commands: Iterable[Command] = (),
        *,
        catalog: ItemCatalog | None = None,
        capacity: int | None = None,
    ) -> None:
        self._initial = SimulationState(catalog=catalog, capacity=capacity)
        self._commands: list[Command] = list(commands)
        self._states: list[SimulationState] = []
        self._steps: list[ReplayStep] = []
        _ensure_replay_trace()
        self._recompute_from(0)

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def steps(self) -> tuple[ReplayStep, ...]:
        return tuple(self._steps)

    @property
    def valid_count(self) -> int:
        return sum(1 for step in self._steps if step.valid)

    def __len__(self) -> int:
        return len(self._commands)

    def _check_index(self, index: int, *, upper: int) -> int:
        index = int(index)
        if index < 0 or index > upper:
            raise ReplayError(f"step index out of range: {index} (0..{upper})")
        return index

    def _recompute_from(self, index: int) -> None:
        del self._states[index:]
        del self._steps[index:]
        base = self._states[index - 1] if index > 0 else self._initial
        state = base.deep_clone()
        for idx in range(index, len(self._commands)):
            self._steps.append(apply_command(state, self._commands[idx], index=idx))
            self._states.append(state)
            state = state.deep_clone()

    def state_at(self, index: int) -> SimulationState:
        """Return a copy of the state right after command `index`."""
        index = self._check_index(index, upper=len(self._commands) - 1)
        return self._states[index].deep_clone()

    def final_state(self) -> SimulationState:
        if not self._states:
            return self._initial.deep_clone()
        return self._states[-1].deep_clone()

    def append(self, command: Command) -> None:
        self.insert(len(self._commands), command)

    def insert(self, index: int, command: Command) -> None:
        index = self._check_index(index, upper=len(self._commands))
        self._commands.insert(index, command)
        self._recompute_from(index)

    def remove(self, index: int) -> Command:
        index = self._check_index(index, upper=len(self._commands) - 1)
        command = self._commands.pop(index)
        self._recompute_from(index)
        return command

    def replace(self, index: int, command: Command) -> None:
        index = self._check_index(index, upper=len(self._commands) - 1)
        self._commands[index] = command
        self._recompute_from(index)
