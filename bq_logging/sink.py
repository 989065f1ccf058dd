"""Batch sink turning log records into table rows."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, List, Mapping, Protocol, Sequence

from .fields import CustomFieldSet, FieldMapping
from .gate import GateState, HandlingGate
from .metrics import record_insert, record_insert_failure, record_level_rejection
from .schema import build_row

logger = logging.getLogger(__name__)


class TableStore(Protocol):
    """Destination table for built rows."""

    def exists(self) -> bool:  # pragma: no cover - protocol
        ...

    def insert_rows(self, rows: Sequence[Mapping[str, Any]]) -> None:  # pragma: no cover - protocol
        ...


class BigQuerySink:
    """Builds rows from log records and inserts them in one call per batch."""

    def __init__(
        self,
        table: TableStore,
        *,
        level: int = logging.DEBUG,
        custom_fields: Mapping[str, Any] | None = None,
        field_mapping: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the sink with a table store, level threshold, custom fields and mapping."""

        self._table = table # The table rows are inserted into
        self._level = int(level) # Records below this level are not handled
        self._custom_fields = CustomFieldSet(custom_fields) # Fields added to every row
        self._field_mapping = FieldMapping(field_mapping) # Record field to column renames
        self._gate = HandlingGate(table.exists) # Cached table existence check

    @property
    def level(self) -> int:
        return self._level

    @level.setter
    def level(self, value: int) -> None:
        self._level = int(value)

    @property
    def gate_state(self) -> GateState:
        return self._gate.state

    @property
    def custom_fields(self) -> CustomFieldSet:
        return self._custom_fields

    @property
    def field_mapping(self) -> FieldMapping:
        return self._field_mapping

    def set_custom_field(self, name: str | Mapping[str, Any], value: Any = None) -> None:
        """Set a custom field, or several at once when ``name`` is a mapping.

        Functions, lambdas and partials are invoked each time a row is built;
        wrap other callables in :func:`bq_logging.values.deferred` to have them
        invoked, or a function in :func:`bq_logging.values.static` to store it
        as a plain value.
        """

        self._custom_fields.add(name, value)

    def remove_custom_field(self, name: str | Iterable[str]) -> None:
        """Remove one or more custom fields previously added."""

        self._custom_fields.remove(name)

    def set_field_mapping(self, mapping: Mapping[str, str]) -> None:
        self._field_mapping.update(mapping)

    def is_handling(self, record: Mapping[str, Any]) -> bool:
        """Return whether ``record`` would be written.

        The level check runs first so that records below the threshold never
        trigger the table existence probe.
        """

        if int(record["level"]) < self._level:
            record_level_rejection()
            return False

        return self._gate.is_accepting()

    def write(self, record: Mapping[str, Any]) -> None:
        """Write a single record."""

        self.handle_batch([record])

    def handle_batch(self, records: Iterable[Mapping[str, Any]]) -> None:
        """Build a row per record, in order, and insert them with one call."""

        rows: List[Dict[str, Any]] = [
            build_row(record, self._custom_fields, self._field_mapping)
            for record in records
        ]

        if not rows:
            return

        start = time.perf_counter()

        try:
            self._table.insert_rows(rows)
        except Exception:
            record_insert_failure((time.perf_counter() - start) * 1000.0)
            raise

        duration_ms = (time.perf_counter() - start) * 1000.0
        record_insert(duration_ms, len(rows))

        logger.debug("Inserted %d log row(s) in %.1f ms", len(rows), duration_ms)
