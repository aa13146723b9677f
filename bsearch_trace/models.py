from __future__ import annotations

from dataclasses import dataclass, field, replace

READY_MESSAGE = 'Simulation ready. Enter a key and press "Initialize".'


@dataclass(frozen=True, slots=True)
class Registers:
    # A accumulator, B low, C high, D mid, E key. Values are 8-bit.
    A: int = 0
    B: int = 0
    C: int = 0
    D: int = 0
    E: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"A": self.A, "B": self.B, "C": self.C, "D": self.D, "E": self.E}

    def evolve(self, **changes: int) -> Registers:
        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class SimulationState:
    """
    One immutable snapshot of the simulated machine.

    Transitions never mutate a snapshot; they build the successor with
    dataclasses.replace(), so two snapshots can always be compared by value.
    """

    array: tuple[int, ...]
    key_input: str
    key_to_search: int
    base_address: int
    registers: Registers = field(default_factory=Registers)
    hl: int = 0
    low: int | None = None
    high: int | None = None
    mid: int | None = None
    # -1 means the interval was exhausted without a match.
    found_index: int | None = None
    log: tuple[str, ...] = ()
    is_initialized: bool = False
    is_finished: bool = False

    def evolve(self, **changes) -> SimulationState:
        return replace(self, **changes)
