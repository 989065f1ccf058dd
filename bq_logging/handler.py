"""stdlib ``logging`` handler backed by the BigQuery sink."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .config import DEFAULT_EXCLUDED_LOGGERS
from .schema import record_from_logging
from .sink import BigQuerySink


class BigQueryHandler(logging.Handler):
    """Route stdlib log records into a :class:`BigQuerySink`.

    Records emitted by the sink's own transport (this package, the Google
    client libraries, ``urllib3``) are never handled, otherwise a failing
    insert would log into the handler that is failing.
    """

    def __init__(
        self,
        sink: BigQuerySink,
        level: int = logging.NOTSET,
        *,
        bubble: bool = True,
        excluded_loggers: Sequence[str] = DEFAULT_EXCLUDED_LOGGERS,
    ) -> None:
        super().__init__(sink.level if level == logging.NOTSET else level)

        self._sink = sink
        self._sink.level = self.level
        self.bubble = bubble
        self._excluded = tuple(excluded_loggers)

    @property
    def sink(self) -> BigQuerySink:
        return self._sink

    def setLevel(self, level: int | str) -> None:  # noqa: N802 - stdlib API
        super().setLevel(level)
        self._sink.level = self.level

    def set_custom_field(self, name: str | Mapping[str, Any], value: Any = None) -> None:
        self._sink.set_custom_field(name, value)

    def remove_custom_field(self, name: str | Iterable[str]) -> None:
        self._sink.remove_custom_field(name)

    def is_excluded(self, record: logging.LogRecord) -> bool:
        name = record.name
        return any(name == prefix or name.startswith(prefix + ".") for prefix in self._excluded)

    def is_handling(self, record: logging.LogRecord) -> bool:
        """Level threshold first, then the sink's cached table check."""

        if self.is_excluded(record):
            return False

        return self._sink.is_handling({"level": record.levelno})

    def handle(self, record: logging.LogRecord) -> Any:
        if self.is_excluded(record):
            return False

        rv = self.filter(record)
        if not rv:
            return False
        if isinstance(rv, logging.LogRecord):
            record = rv

        try:
            handling = self.is_handling(record)
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)
            return False

        if not handling:
            return False

        self.acquire()
        try:
            self.emit(record)
        finally:
            self.release()

        return rv

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._sink.write(self.to_record(record))
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def handle_batch(self, records: Iterable[logging.LogRecord]) -> None:
        """Write every handled record with a single insert call.

        Unlike :meth:`emit`, failures propagate to the caller.
        """

        payloads: List[Dict[str, Any]] = []

        for record in records:
            if self.is_excluded(record):
                continue

            rv = self.filter(record)
            if not rv:
                continue
            if isinstance(rv, logging.LogRecord):
                record = rv

            if self.is_handling(record):
                payloads.append(self.to_record(record))

        if not payloads:
            return

        self.acquire()
        try:
            self._sink.handle_batch(payloads)
        finally:
            self.release()

    def to_record(self, record: logging.LogRecord) -> Dict[str, Any]:
        return record_from_logging(record, formatted=self.format(record))
