"""Persist log records as rows in a Google BigQuery table."""

from __future__ import annotations

import logging

from google.cloud import bigquery

from .config import SinkSettings, configure_settings, get_settings, load_settings
from .errors import BigQueryLoggingError, ConfigurationError, RowInsertError
from .handler import BigQueryHandler
from .metrics import get_metrics, reset_metrics
from .schema import build_row, record_from_logging
from .sink import BigQuerySink
from .sinks import BigQueryTable, InMemoryTable
from .values import deferred, static

__all__ = [
    "configure",
    "SinkSettings",
    "load_settings",
    "get_settings",
    "BigQueryHandler",
    "BigQuerySink",
    "BigQueryTable",
    "InMemoryTable",
    "build_row",
    "record_from_logging",
    "deferred",
    "static",
    "get_metrics",
    "reset_metrics",
    "BigQueryLoggingError",
    "ConfigurationError",
    "RowInsertError",
]


def configure(
    settings: SinkSettings | None = None,
    *,
    client: bigquery.Client | None = None,
    logger: str | None = None,
    **overrides,
) -> BigQueryHandler:
    """Build a BigQuery handler from settings and attach it to ``logger``."""

    resolved = configure_settings(settings, **overrides).validate()

    if client is None:
        client = bigquery.Client(project=resolved.project)

    table = BigQueryTable(
        client,
        resolved.dataset,
        resolved.table,
        project=resolved.project,
        skip_invalid_rows=resolved.skip_invalid_rows,
        ignore_unknown_values=resolved.ignore_unknown_values,
    )
    sink = BigQuerySink(
        table,
        level=resolved.level_number,
        custom_fields=resolved.custom_fields,
        field_mapping=resolved.field_mapping,
    )
    handler = BigQueryHandler(
        sink,
        resolved.level_number,
        bubble=resolved.bubble,
        excluded_loggers=resolved.excluded_loggers,
    )

    target = logging.getLogger(logger)
    target.addHandler(handler)
    if logger:
        target.propagate = resolved.bubble

    return handler
