from __future__ import annotations

from bsearch_trace.models import SimulationState
from bsearch_trace.trace import POINTER_WIDTH, format_hex

REGISTER_ROWS: tuple[tuple[str, str], ...] = (
    ("A", "Accumulator"),
    ("B", "low"),
    ("C", "high"),
    ("D", "mid"),
    ("E", "Key"),
)


def result_text(state: SimulationState) -> str | None:
    """The result line, or None while the run has no outcome yet."""
    if state.found_index is None:
        return None
    if state.found_index == -1:
        return "Key Not Found (FFH)"
    return f"Key Found at Index {state.found_index}"


def render_registers(state: SimulationState) -> list[str]:
    labels = [f"{name} ({desc})" for name, desc in REGISTER_ROWS] + ["HL (Mem Pointer)"]
    width = max(len(label) for label in labels)

    regs = state.registers.as_dict()
    values = [format_hex(regs[name]) for name, _ in REGISTER_ROWS]
    values.append(format_hex(state.hl, POINTER_WIDTH))

    return [f"  {label.ljust(width)}  {value}" for label, value in zip(labels, values)]


def _marks(state: SimulationState, index: int) -> str:
    marks: list[str] = []
    if index == state.mid:
        marks.append("mid")
    if index == state.found_index:
        marks.append("found")
    if index == state.low:
        marks.append("<low")
    if index == state.high:
        marks.append("<high")
    return " ".join(marks)


def render_array(state: SimulationState) -> list[str]:
    """
    One row per array cell: index, address, value and markers.

    mid/found mark the probed cell; <low/<high mark the interval bounds.
    """
    out: list[str] = []
    idx_width = len(str(max(len(state.array) - 1, 0)))
    for index, value in enumerate(state.array):
        address = format_hex(state.base_address + index, POINTER_WIDTH)
        marks = _marks(state, index)
        row = f"  {str(index).rjust(idx_width)}  {address}  {format_hex(value)}"
        out.append(f"{row}  {marks}" if marks else row)
    return out


def render_log(state: SimulationState) -> list[str]:
    return list(state.log)


def render_state(state: SimulationState) -> str:
    out: list[str] = ["Registers"]
    out.extend(render_registers(state))
    out.append("")
    out.append("Memory Array")
    out.extend(render_array(state))

    result = result_text(state)
    if result is not None:
        out.append("")
        out.append(f"Result: {result}")

    return "\n".join(out) + "\n"
