"""Custom fields and column renaming shared by every outgoing row."""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, Mapping

from .values import FieldValue, classify


class CustomFieldSet:
    """Application supplied values merged into every row."""

    def __init__(self, fields: Mapping[str, Any] | None = None) -> None:
        self._lock = threading.RLock()
        self._fields: Dict[str, FieldValue] = {}

        if fields:
            self.add(fields)

    def add(self, name: str | Mapping[str, Any], value: Any = None) -> None:
        """Add one field, or merge a mapping of fields. Existing names are overwritten."""

        if isinstance(name, Mapping):
            updates = {key: classify(item) for key, item in name.items()}
        else:
            updates = {name: classify(value)}

        with self._lock:
            self._fields.update(updates)

    def remove(self, name: str | Iterable[str]) -> None:
        """Remove one or more fields. Unknown names are ignored."""

        names = [name] if isinstance(name, str) else list(name)

        with self._lock:
            for key in names:
                self._fields.pop(key, None)

    def snapshot(self) -> Dict[str, FieldValue]:
        with self._lock:
            return dict(self._fields)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._fields

    def __len__(self) -> int:
        with self._lock:
            return len(self._fields)


class FieldMapping:
    """Rename table from record field names to destination columns."""

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        self._lock = threading.RLock()
        self._mapping: Dict[str, str] = dict(mapping or {})

    def resolve(self, name: str) -> str:
        """Return the destination column for ``name``; unmapped names are kept."""

        with self._lock:
            return self._mapping.get(name, name)

    def update(self, mapping: Mapping[str, str]) -> None:
        with self._lock:
            self._mapping.update(mapping)

    def as_dict(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._mapping)
