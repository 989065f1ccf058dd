"""Tests for the table availability gate."""

from __future__ import annotations

import threading
import time

import pytest

from bq_logging.gate import GateState, HandlingGate
from bq_logging.metrics import get_metrics


@pytest.mark.parametrize("exists, expected_state", [(True, GateState.ACCEPTING), (False, GateState.REJECTING)])
def test_gate_probes_once(exists, expected_state):
    probes = []

    def _probe():
        probes.append(1)
        return exists

    gate = HandlingGate(_probe)
    assert gate.state is GateState.UNRESOLVED

    answers = [gate.is_accepting() for _ in range(5)]

    assert answers == [exists] * 5
    assert len(probes) == 1
    assert gate.state is expected_state
    assert get_metrics().probes_total == 1
    assert get_metrics().table_available is exists


def test_gate_stays_unresolved_when_probe_raises():
    outcomes = iter([RuntimeError("network"), True])

    def _probe():
        outcome = next(outcomes)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    gate = HandlingGate(_probe)

    with pytest.raises(RuntimeError):
        gate.is_accepting()

    assert gate.state is GateState.UNRESOLVED
    assert gate.is_accepting() is True


def test_gate_probes_once_under_concurrency():
    probes = []
    barrier = threading.Barrier(8)

    def _probe():
        probes.append(1)
        time.sleep(0.01)
        return True

    gate = HandlingGate(_probe)
    results = []

    def _worker():
        barrier.wait()
        results.append(gate.is_accepting())

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == [True] * 8
    assert len(probes) == 1
