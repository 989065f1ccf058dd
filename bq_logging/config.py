"""Configuration utilities for the BigQuery sink."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from .errors import ConfigurationError

DEFAULT_EXCLUDED_LOGGERS = (
    "bq_logging",
    "google.cloud",
    "google.auth",
    "google.api_core",
    "google.resumable_media",
    "urllib3",
)


def _comma_tuple(value: str | None, *, default: tuple[str, ...]) -> tuple[str, ...]:
    """Convert a comma-separated string to a tuple."""

    if not value:
        return default

    return tuple(filter(None, (part.strip() for part in value.split(","))))


def _bool_env(value: str | None, default: bool) -> bool:
    """Convert a string to a boolean."""

    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _pairs_env(value: str | None) -> Mapping[str, str]:
    """Convert ``key=value,key=value`` into a read-only mapping."""

    pairs: dict[str, str] = {}

    for part in _comma_tuple(value, default=()):
        key, sep, item = part.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(f"Expected key=value, got {part!r}")
        pairs[key.strip()] = item.strip()

    return MappingProxyType(pairs)


def resolve_level(level: str | int) -> int:
    """Translate a level name or number into a stdlib logging level."""

    if isinstance(level, int):
        return level

    name = level.strip().upper()
    if name.isdigit():
        return int(name)

    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown log level: {level!r}")

    return resolved


@dataclass(frozen=True)
class SinkSettings:
    """Immutable runtime configuration."""

    project: str | None
    dataset: str
    table: str
    level: str
    bubble: bool
    field_mapping: Mapping[str, str] = field(default_factory=dict)
    custom_fields: Mapping[str, Any] = field(default_factory=dict)
    skip_invalid_rows: bool = False
    ignore_unknown_values: bool = False
    excluded_loggers: tuple[str, ...] = DEFAULT_EXCLUDED_LOGGERS

    @property
    def level_number(self) -> int:
        return resolve_level(self.level)

    def with_overrides(self, **kwargs: Any) -> "SinkSettings":
        return replace(self, **kwargs)

    def validate(self) -> "SinkSettings":
        """Raise ``ConfigurationError`` when the settings cannot build a sink."""

        if not self.dataset:
            raise ConfigurationError("BigQuery dataset is required (BQ_LOG_DATASET)")
        if not self.table:
            raise ConfigurationError("BigQuery table is required (BQ_LOG_TABLE)")

        resolve_level(self.level)

        return self


_SETTINGS_LOCK = threading.RLock()
_SETTINGS: SinkSettings | None = None


def load_settings(env: Mapping[str, str] | None = None) -> SinkSettings:
    source = os.environ if env is None else env

    return SinkSettings(
        project=source.get("BQ_LOG_PROJECT") or None,
        dataset=source.get("BQ_LOG_DATASET", ""),
        table=source.get("BQ_LOG_TABLE", "logs"),
        level=source.get("BQ_LOG_LEVEL", "DEBUG").upper(),
        bubble=_bool_env(source.get("BQ_LOG_BUBBLE"), True),
        field_mapping=_pairs_env(source.get("BQ_LOG_FIELD_MAP")),
        custom_fields=_pairs_env(source.get("BQ_LOG_CUSTOM_FIELDS")),
        skip_invalid_rows=_bool_env(source.get("BQ_LOG_SKIP_INVALID_ROWS"), False),
        ignore_unknown_values=_bool_env(
            source.get("BQ_LOG_IGNORE_UNKNOWN_VALUES"), False
        ),
        excluded_loggers=_comma_tuple(
            source.get("BQ_LOG_EXCLUDED_LOGGERS"), default=DEFAULT_EXCLUDED_LOGGERS
        ),
    )


def configure_settings(
    settings: SinkSettings | None = None, **overrides: Any
) -> SinkSettings:
    with _SETTINGS_LOCK:
        resolved = settings or load_settings()
        if overrides:
            resolved = resolved.with_overrides(**overrides)
        global _SETTINGS
        _SETTINGS = resolved
        return _SETTINGS


def get_settings() -> SinkSettings:
    with _SETTINGS_LOCK:
        if _SETTINGS is None:
            return configure_settings()
        return _SETTINGS


def reset_settings() -> None:
    with _SETTINGS_LOCK:
        global _SETTINGS
        _SETTINGS = None
