from __future__ import annotations

from dataclasses import fields
from typing import Any

from bsearch_trace.models import SimulationState


def diff_snapshots(before: SimulationState, after: SimulationState) -> dict[str, tuple[Any, Any]]:
    """
    Field-by-field difference between two snapshots: name -> (old, new).

    Registers are compared one by one and reported as "registers.A" etc.
    The log is reported as a whole when it differs.
    """
    changes: dict[str, tuple[Any, Any]] = {}
    for f in fields(SimulationState):
        old = getattr(before, f.name)
        new = getattr(after, f.name)
        if f.name == "registers":
            old_regs = old.as_dict()
            new_regs = new.as_dict()
            for name, value in old_regs.items():
                if new_regs[name] != value:
                    changes[f"registers.{name}"] = (value, new_regs[name])
            continue
        if old != new:
            changes[f.name] = (old, new)
    return changes


def appended_log_lines(before: SimulationState, after: SimulationState) -> tuple[str, ...]:
    """
    Return the log lines a step() added on top of its predecessor.

    A rendering layer scrolls the log whenever this is non-empty.
    initialize() replaces the log, so only step() successors qualify.
    """
    n = len(before.log)
    if after.log[:n] != before.log:
        raise ValueError("log is not a prefix-extension of the previous snapshot's log")
    return after.log[n:]
