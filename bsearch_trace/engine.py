from __future__ import annotations

import logging
import string
from typing import Sequence

from bsearch_trace.event_sink import EventSink
from bsearch_trace.events import EventType
from bsearch_trace.models import READY_MESSAGE, Registers, SimulationState
from bsearch_trace.trace import (
    found_lines,
    init_lines,
    lower_half_lines,
    not_found_lines,
    probe_lines,
    upper_half_lines,
)

logger = logging.getLogger(__name__)

INITIAL_ARRAY: tuple[int, ...] = (0x10, 0x20, 0x35, 0x42, 0x58, 0x66, 0x73, 0x89, 0x91, 0xA4)
INITIAL_KEY_INPUT = "0x66"
ARRAY_ADDR = 0x3000

REGISTER_MASK = 0xFF
NOT_FOUND_CODE = 0xFF


def _reg(value: int) -> int:
    # 8-bit register write: DCR C from 0 wraps to 0xFF.
    return value & REGISTER_MASK


def parse_key(text: str) -> int:
    """
    Parse the search key text.

    Text that starts with a case-insensitive "0x" selects base 16, anything
    else base 10. The prefix test runs on the raw text, so " 0x66" is decimal
    and parses as 0. On the decimal path leading whitespace and one "+" are
    skipped. The longest leading run of digits is used ("12abc" -> 12). Text
    with no leading digits parses as 0; this is the documented fallback, not
    an error. Keys are unsigned, so "-5" also parses as 0.
    """
    if text.lower().startswith("0x"):
        digits, base, valid = text[2:], 16, string.hexdigits
    else:
        digits = text.lstrip()
        if digits.startswith("+"):
            digits = digits[1:]
        base, valid = 10, string.digits

    n = 0
    while n < len(digits) and digits[n] in valid:
        n += 1
    if n == 0:
        return 0
    return int(digits[:n], base)


def default_state(
        key_input: str = INITIAL_KEY_INPUT,
        *,
        array: Sequence[int] = INITIAL_ARRAY,
        base_address: int = ARRAY_ADDR,
) -> SimulationState:
    """The pre-initialized snapshot shown before the first initialize()."""
    return SimulationState(
        array=tuple(array),
        key_input=key_input,
        key_to_search=parse_key(key_input),
        base_address=base_address,
        log=(READY_MESSAGE,),
    )


def reset(*, array: Sequence[int] = INITIAL_ARRAY, base_address: int = ARRAY_ADDR) -> SimulationState:
    logger.debug("reset")
    return default_state(array=array, base_address=base_address)


def set_key_input(
        text: str,
        *,
        array: Sequence[int] = INITIAL_ARRAY,
        base_address: int = ARRAY_ADDR,
) -> SimulationState:
    """Editing the key text discards the current run."""
    return default_state(text, array=array, base_address=base_address)


def can_initialize(state: SimulationState) -> bool:
    # Initialize is locked only while a run is in progress.
    return not (state.is_initialized and not state.is_finished)


def can_step(state: SimulationState) -> bool:
    return state.is_initialized and not state.is_finished


def initialize(
        raw_key_input: str,
        array: Sequence[int] = INITIAL_ARRAY,
        *,
        base_address: int = ARRAY_ADDR,
        event_sink: EventSink | None = None,
) -> SimulationState:
    """
    Build the initial snapshot of a run.

    Loads HL with the array base, E with the key, B with low=0 and C with
    high=len(array)-1. The log is replaced by the initialization block.
    """
    values = tuple(array)
    key = parse_key(raw_key_input)
    high = len(values) - 1

    registers = Registers(A=0, B=0, C=_reg(high), D=0, E=_reg(key))
    log = init_lines(base_address=base_address, key=key, high=high, high_register=registers.C)

    logger.debug("initialize: key=%#x len=%d base=%#06x", key, len(values), base_address)

    if event_sink is not None:
        event_sink.start_step()
        event_sink.emit(EventType.INITIALIZED, key=key, low=0, high=high, hl=base_address)

    return SimulationState(
        array=values,
        key_input=raw_key_input,
        key_to_search=key,
        base_address=base_address,
        registers=registers,
        hl=base_address,
        low=0,
        high=high,
        mid=None,
        found_index=None,
        log=tuple(log),
        is_initialized=True,
        is_finished=False,
    )


def step(state: SimulationState, event_sink: EventSink | None = None) -> SimulationState:
    """
    Advance the run by one loop iteration (or terminate it).

    Rules:
    - Not initialized, or already finished: no-op, the same snapshot is returned.
    - low > high: the interval is exhausted. A = 0xFF, found_index = -1. Terminal.
    - Otherwise probe mid = (low + high) // 2 and compare ARRAY[mid] with the key:
        equal   -> found, A = mid (the index, not the value). Terminal.
        smaller -> low = mid + 1 (INR B)
        larger  -> high = mid - 1 (DCR C)

    Exactly one of these happens per call. The log only grows.
    """
    if event_sink is not None:
        event_sink.start_step()

    if not can_step(state):
        logger.debug(
            "step ignored: initialized=%s finished=%s", state.is_initialized, state.is_finished
        )
        if event_sink is not None:
            event_sink.emit(
                EventType.STEP_IGNORED,
                is_initialized=state.is_initialized,
                is_finished=state.is_finished,
            )
        return state

    low = int(state.low)
    high = int(state.high)
    key = state.key_to_search

    if event_sink is not None:
        event_sink.emit(EventType.STEP_START, low=low, high=high)

    # 1) loop check
    if low > high:
        logger.debug("interval exhausted: low=%d high=%d", low, high)
        if event_sink is not None:
            event_sink.emit(EventType.KEY_NOT_FOUND, low=low, high=high)
        return state.evolve(
            registers=state.registers.evolve(A=NOT_FOUND_CODE),
            found_index=-1,
            is_finished=True,
            log=state.log + tuple(not_found_lines(low=low, high=high)),
        )

    # 2) probe the midpoint
    mid = (low + high) // 2
    value = state.array[mid]
    address = state.base_address + mid
    log = state.log + tuple(
        probe_lines(
            low=low,
            high=high,
            mid=mid,
            base_address=state.base_address,
            value=value,
            key=key,
        )
    )
    logger.debug("probe: mid=%d ARRAY[mid]=%#04x key=%#04x", mid, value, key)

    if event_sink is not None:
        event_sink.emit(EventType.MID_PROBED, mid=mid, address=address, value=value, key=key)

    # 3) branch on the compare
    if value == key:
        if event_sink is not None:
            event_sink.emit(EventType.KEY_FOUND, index=mid)
        return state.evolve(
            registers=state.registers.evolve(A=_reg(mid), D=_reg(mid)),
            hl=address,
            mid=mid,
            found_index=mid,
            is_finished=True,
            log=log + tuple(found_lines(mid=mid)),
        )

    if value < key:
        new_low = mid + 1
        if event_sink is not None:
            event_sink.emit(EventType.LOW_RAISED, low=new_low)
        return state.evolve(
            registers=state.registers.evolve(A=_reg(value), D=_reg(mid), B=_reg(new_low)),
            hl=address,
            mid=mid,
            low=new_low,
            log=log + tuple(upper_half_lines(value=value, key=key, new_low=new_low)),
        )

    new_high = mid - 1
    if event_sink is not None:
        event_sink.emit(EventType.HIGH_LOWERED, high=new_high)
    return state.evolve(
        registers=state.registers.evolve(A=_reg(value), D=_reg(mid), C=_reg(new_high)),
        hl=address,
        mid=mid,
        high=new_high,
        log=log + tuple(lower_half_lines(value=value, key=key, new_high=new_high)),
    )


def run_to_completion(
        state: SimulationState,
        *,
        event_sink: EventSink | None = None,
        max_steps: int | None = None,
) -> list[SimulationState]:
    """
    Step until the run finishes, returning every successor snapshot in order.

    max_steps caps the number of step() calls. An idle snapshot (not
    initialized, or finished) yields an empty history.
    """
    history: list[SimulationState] = []
    current = state
    while can_step(current):
        if max_steps is not None and len(history) >= max_steps:
            break
        current = step(current, event_sink=event_sink)
        history.append(current)
    logger.info("run stopped after %d step(s); finished=%s", len(history), current.is_finished)
    return history
