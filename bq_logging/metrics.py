"""In-process metrics for the BigQuery sink."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass
class SinkMetrics:
    """Runtime metrics for the BigQuery sink."""

    probes_total: int = 0 # Table existence probes issued
    table_available: bool | None = None # Result of the last probe
    level_rejections_total: int = 0 # Records below the level threshold
    batches_total: int = 0 # Insert calls issued
    rows_total: int = 0 # Rows handed to the table store
    insert_failures_total: int = 0 # Insert calls that raised
    last_insert_duration_ms: float = 0.0 # Duration of the last insert call

    def as_dict(self) -> dict[str, object]:
        """Return the metrics as a dictionary."""

        return {
            "probes_total": self.probes_total,
            "table_available": self.table_available,
            "level_rejections_total": self.level_rejections_total,
            "batches_total": self.batches_total,
            "rows_total": self.rows_total,
            "insert_failures_total": self.insert_failures_total,
            "last_insert_duration_ms": self.last_insert_duration_ms,
        }


_LOCK = threading.RLock()
_METRICS = SinkMetrics()


def record_probe(available: bool) -> None:
    """Record a table existence probe."""

    with _LOCK:
        _METRICS.probes_total += 1
        _METRICS.table_available = available


def record_level_rejection() -> None:
    with _LOCK:
        _METRICS.level_rejections_total += 1


def record_insert(duration_ms: float, row_count: int) -> None:
    """Record a successful insert of a batch of rows."""

    with _LOCK:
        _METRICS.batches_total += 1
        _METRICS.rows_total += row_count
        _METRICS.last_insert_duration_ms = duration_ms


def record_insert_failure(duration_ms: float) -> None:
    """Record an insert call that raised."""

    with _LOCK:
        _METRICS.batches_total += 1
        _METRICS.insert_failures_total += 1
        _METRICS.last_insert_duration_ms = duration_ms


def reset_metrics() -> None:
    """Reset the metrics."""

    with _LOCK:
        _METRICS.probes_total = 0
        _METRICS.table_available = None
        _METRICS.level_rejections_total = 0
        _METRICS.batches_total = 0
        _METRICS.rows_total = 0
        _METRICS.insert_failures_total = 0
        _METRICS.last_insert_duration_ms = 0.0


def get_metrics() -> SinkMetrics:
    """Get a snapshot of the metrics."""

    with _LOCK:
        return SinkMetrics(**_METRICS.as_dict())
