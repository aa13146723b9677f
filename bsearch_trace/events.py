from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    """
    Structured counterparts of the trace lines.
    One event per transition outcome; the log stays the human-readable view.
    """

    INITIALIZED = "INITIALIZED"
    STEP_START = "STEP_START"
    MID_PROBED = "MID_PROBED"
    LOW_RAISED = "LOW_RAISED"
    HIGH_LOWERED = "HIGH_LOWERED"
    KEY_FOUND = "KEY_FOUND"
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    STEP_IGNORED = "STEP_IGNORED"


@dataclass(frozen=True, slots=True)
class Event:
    """
    A structured, orderable fact emitted by the engine (optionally).

    step and seq are owned by the sink (so the engine remains stateless).
    """

    step: int
    seq: int
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
