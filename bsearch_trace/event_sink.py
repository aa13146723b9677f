from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from bsearch_trace.events import Event, EventType

TERMINAL_EVENTS = frozenset({EventType.KEY_FOUND, EventType.KEY_NOT_FOUND})


class EventSink(ABC):
    """
    Consumer of structured events.
    The engine must be able to run with event_sink=None (no events).
    """

    @abstractmethod
    def start_step(self) -> int: ...

    @abstractmethod
    def emit(self, event_type: EventType, **data: Any) -> None: ...


@dataclass
class InMemoryEventSink(EventSink):
    """
    Simple sink for tests/demos.
    Owns step/seq numbering so the engine stays free of global state.
    Every engine call (initialize or step) opens a new step.
    """

    events: list[Event] = field(default_factory=list)
    _step: int = field(default=0, init=False)
    _seq: int = field(default=0, init=False)

    @property
    def current_step(self) -> int:
        return self._step

    def start_step(self) -> int:
        self._step += 1
        self._seq = 0
        return self._step

    def emit(self, event_type: EventType, **data: object) -> None:
        if self._step <= 0:
            raise RuntimeError("EventSink.start_step() must be called before emitting events.")
        self._seq += 1
        self.events.append(
            Event(
                step=self._step,
                seq=self._seq,
                type=event_type,
                data=dict(data),
            )
        )

    def of_type(self, event_type: EventType) -> list[Event]:
        return [e for e in self.events if e.type == event_type]

    def current_run(self) -> list[Event]:
        """Events since the most recent INITIALIZED (all events if there is none)."""
        start = 0
        for i, e in enumerate(self.events):
            if e.type == EventType.INITIALIZED:
                start = i
        return self.events[start:]

    def probed_indices(self) -> list[int]:
        """The mid index read by each loop iteration of the current run, in order."""
        return [int(e.data["mid"]) for e in self.current_run() if e.type == EventType.MID_PROBED]

    def outcome(self) -> Event | None:
        """KEY_FOUND or KEY_NOT_FOUND for the current run, or None while it is in progress."""
        for e in self.current_run():
            if e.type in TERMINAL_EVENTS:
                return e
        return None
