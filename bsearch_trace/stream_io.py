from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from bsearch_trace.engine import ARRAY_ADDR, INITIAL_ARRAY, INITIAL_KEY_INPUT, REGISTER_MASK
from bsearch_trace.events import Event

ADDRESS_MAX = 0xFFFF


class InputFormatError(ValueError):
    """Raised when a session file fails validation."""


@dataclass(frozen=True)
class SessionConfig:
    array: tuple[int, ...] = INITIAL_ARRAY
    base_address: int = ARRAY_ADDR
    key_input: str = INITIAL_KEY_INPUT


def load_session_config(path: Path) -> SessionConfig:
    """Load and validate a session file.

    Format (every key optional; missing keys keep the built-in defaults):
      {
        "array": [16, 32, 53, 66],
        "base_address": 12288,
        "key": "0x42"
      }

    The array must be non-empty, sorted ascending, with 8-bit values, and
    must fit in the 16-bit address space starting at base_address.
    """

    if not path.exists():
        raise InputFormatError(f"file not found: {path}")
    if not path.is_file():
        raise InputFormatError(f"not a file: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputFormatError(
            f"invalid JSON: {e.msg} (line {e.lineno}, col {e.colno})"
        ) from e

    if not isinstance(raw, dict):
        raise InputFormatError("root must be a JSON object")

    array = _parse_array(raw["array"]) if "array" in raw else INITIAL_ARRAY

    base_address = raw.get("base_address", ARRAY_ADDR)
    # bool is an int subclass; reject it explicitly.
    if not isinstance(base_address, int) or isinstance(base_address, bool):
        raise InputFormatError("base_address must be an int")
    if base_address < 0 or base_address > ADDRESS_MAX:
        raise InputFormatError(f"base_address must be in [0..{ADDRESS_MAX:#06x}] (got {base_address})")
    if base_address + len(array) - 1 > ADDRESS_MAX:
        raise InputFormatError(
            f"array of length {len(array)} at base_address {base_address:#06x} "
            "does not fit in the 16-bit address space"
        )

    key = raw.get("key", INITIAL_KEY_INPUT)
    if not isinstance(key, str):
        raise InputFormatError("key must be a string")

    return SessionConfig(array=array, base_address=base_address, key_input=key)


def _parse_array(raw: object) -> tuple[int, ...]:
    if not isinstance(raw, list) or not raw:
        raise InputFormatError("array must be a non-empty array")

    values: list[int] = []
    for i, v in enumerate(raw):
        if not isinstance(v, int) or isinstance(v, bool):
            raise InputFormatError(f"array[{i}] must be an int")
        if v < 0 or v > REGISTER_MASK:
            raise InputFormatError(f"array[{i}] must be in [0..{REGISTER_MASK:#04x}] (got {v})")
        if values and v < values[-1]:
            raise InputFormatError(
                f"array must be sorted ascending; array[{i}]={v} after {values[-1]}"
            )
        values.append(v)
    return tuple(values)


def dump_event_stream(events: list[Event]) -> list[dict[str, Any]]:
    """Return a JSON-serializable event stream."""
    out: list[dict[str, Any]] = []
    for e in events:
        d = asdict(e)
        d["type"] = str(e.type.value)
        out.append(d)
    return out
