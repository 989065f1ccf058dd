"""Exceptions raised by the BigQuery logging sink."""

from __future__ import annotations

from typing import Any, List, Mapping, Sequence


class BigQueryLoggingError(Exception):
    pass


class ConfigurationError(BigQueryLoggingError):
    pass


class RowInsertError(BigQueryLoggingError):
    """BigQuery rejected some or all rows of a streaming insert."""

    def __init__(self, errors: Sequence[Mapping[str, Any]]) -> None:
        self.errors: List[Mapping[str, Any]] = list(errors)
        super().__init__(f"BigQuery rejected {len(self.errors)} row(s)")
