"""Row construction for log records."""

from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Dict, Mapping, Optional

from .fields import CustomFieldSet, FieldMapping
from .values import encode_structured, format_value

FORMATTED_FIELD = "formatted"
TIMESTAMP_FIELD = "datetime"
CONTEXT_FIELDS = frozenset({"context", "extra"})

# Attributes every stdlib LogRecord carries; anything else came in via ``extra=``.
_STANDARD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "context",
    "taskName",
}

_EXCEPTION_FORMATTER = logging.Formatter()


def build_row(
    record: Mapping[str, Any],
    custom_fields: CustomFieldSet | None = None,
    field_mapping: FieldMapping | None = None,
) -> Dict[str, Any]:
    """Build the BigQuery row for a single log record.

    Custom fields seed the row under their own names. Record fields are
    renamed through ``field_mapping`` and written afterwards, so they win
    when both land on the same column. The ``formatted`` field is never
    written, ``context`` and ``extra`` are stored as JSON text and the log
    timestamp is normalised to UTC.
    """

    row: Dict[str, Any] = {}

    if custom_fields is not None:
        for name, value in custom_fields.snapshot().items():
            row[name] = format_value(value)

    for name, value in record.items():
        if name == FORMATTED_FIELD:
            continue

        column = field_mapping.resolve(name) if field_mapping is not None else name

        formatted = format_value(value, utc=name == TIMESTAMP_FIELD)
        if name in CONTEXT_FIELDS:
            formatted = encode_structured(formatted)

        row[column] = formatted

    return row


def record_from_logging(
    log_record: logging.LogRecord, *, formatted: Optional[str] = None
) -> Dict[str, Any]:
    """Convert a stdlib ``LogRecord`` into the canonical record mapping."""

    context = dict(getattr(log_record, "context", None) or {})

    if log_record.exc_info:
        context.setdefault(
            "exception", _EXCEPTION_FORMATTER.formatException(log_record.exc_info)
        )

    extra = {
        key: value
        for key, value in vars(log_record).items()
        if key not in _STANDARD_ATTRIBUTES
    }

    record: Dict[str, Any] = {
        "channel": log_record.name,
        "message": log_record.getMessage(),
        "level": log_record.levelno,
        "level_name": log_record.levelname,
        "context": context,
        "extra": extra,
        TIMESTAMP_FIELD: _dt.datetime.fromtimestamp(log_record.created).astimezone(),
    }

    if formatted is not None:
        record[FORMATTED_FIELD] = formatted

    return record
