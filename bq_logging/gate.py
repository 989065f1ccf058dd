"""Cached table-availability gate."""

from __future__ import annotations

import enum
import threading
from typing import Callable

from .metrics import record_probe


class GateState(enum.Enum):
    UNRESOLVED = "unresolved"
    ACCEPTING = "accepting"
    REJECTING = "rejecting"


class HandlingGate:
    """Decide once per process whether the sink accepts records.

    The first query runs ``probe`` (does the target table exist?) and the
    answer is kept for the lifetime of the gate. A probe that raises leaves
    the gate unresolved so the next query probes again.
    """

    def __init__(self, probe: Callable[[], bool]) -> None:
        self._probe = probe
        self._lock = threading.Lock()
        self._state = GateState.UNRESOLVED

    @property
    def state(self) -> GateState:
        return self._state

    def is_accepting(self) -> bool:
        state = self._state

        if state is GateState.UNRESOLVED:
            with self._lock:
                if self._state is GateState.UNRESOLVED:
                    available = bool(self._probe())
                    record_probe(available)
                    self._state = (
                        GateState.ACCEPTING if available else GateState.REJECTING
                    )
                state = self._state

        return state is GateState.ACCEPTING
