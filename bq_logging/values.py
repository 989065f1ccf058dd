"""Field value classification and storage formatting."""

from __future__ import annotations

import datetime as _dt
import enum
import functools
import json
import types
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

# Callables invoked implicitly when a row is built.
_PRODUCER_TYPES = (types.FunctionType, types.MethodType, functools.partial)


class ValueKind(enum.Enum):
    """Closed set of value shapes the formatter knows about."""

    SCALAR = "scalar"
    TIMESTAMP = "timestamp"
    DEFERRED = "deferred"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class FieldValue:
    """A raw value tagged with its kind."""

    kind: ValueKind
    payload: Any


def static(value: Any) -> FieldValue:
    """Tag a value as static, even when it happens to be callable."""

    if isinstance(value, _dt.datetime):
        return FieldValue(ValueKind.TIMESTAMP, value)
    if isinstance(value, (Mapping, list, tuple)):
        return FieldValue(ValueKind.STRUCTURED, value)

    return FieldValue(ValueKind.SCALAR, value)


def deferred(producer: Callable[[], Any]) -> FieldValue:
    """Tag a zero-argument callable resolved when each row is built."""

    if not callable(producer):
        raise TypeError("deferred value producer must be callable")

    return FieldValue(ValueKind.DEFERRED, producer)


def classify(value: Any) -> FieldValue:
    """Tag a raw value. Already tagged values pass through.

    Only plain functions, lambdas, bound methods and ``functools.partial``
    objects are treated as deferred producers. Classes and other callable
    objects are stored as values; wrap them in :func:`deferred` to have them
    invoked per row.
    """

    if isinstance(value, FieldValue):
        return value
    if isinstance(value, _dt.datetime):
        return FieldValue(ValueKind.TIMESTAMP, value)
    if isinstance(value, _PRODUCER_TYPES):
        return FieldValue(ValueKind.DEFERRED, value)

    return static(value)


def format_timestamp(value: _dt.datetime, *, utc: bool = False) -> str:
    """Render ``YYYY-MM-DDTHH:MM:SS.ffffff+HH:MM``; naive values are taken as UTC."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=_dt.timezone.utc)
    if utc:
        value = value.astimezone(_dt.timezone.utc)

    return value.isoformat(timespec="microseconds")


def format_value(value: Any, *, utc: bool = False) -> Any:
    """Convert a value into its storage representation.

    Deferred producers are invoked exactly once and their result is used
    as-is. Timestamps are rendered as ISO-8601 strings (converted to UTC
    when ``utc`` is set). Structured values get their direct members
    formatted, one level deep. Anything else is returned unchanged.
    """

    field = classify(value)
    kind = field.kind

    if kind is ValueKind.DEFERRED:
        return field.payload()

    if kind is ValueKind.TIMESTAMP:
        return format_timestamp(field.payload, utc=utc)

    if kind is ValueKind.STRUCTURED:
        return _format_members(field.payload)

    return field.payload


def encode_structured(value: Any) -> str:
    """JSON-encode a context/extra value; empty values become ``{}``.

    Objects JSON cannot represent (UUIDs, decimals, sets, ...) are stored
    as their ``str()``.
    """

    if not value:
        return "{}"

    return json.dumps(value, ensure_ascii=False, default=_json_default)


def _format_members(container: Any) -> Any:
    if isinstance(container, Mapping):
        return {key: _format_member(member) for key, member in container.items()}

    return [_format_member(member) for member in container]


def _format_member(member: Any) -> Any:
    field = classify(member)

    if field.kind is ValueKind.DEFERRED:
        return field.payload()
    if field.kind is ValueKind.TIMESTAMP:
        return format_timestamp(field.payload)

    return field.payload


def _json_default(value: Any) -> Any:
    if isinstance(value, _dt.datetime):
        return format_timestamp(value)

    return str(value)
