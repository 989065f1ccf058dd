"""In-memory table store for tests and local runs."""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping, Sequence


class InMemoryTable:
    """Keeps every inserted batch in memory."""

    def __init__(self, *, exists: bool = True) -> None:
        self.available = exists
        self.probes = 0
        self.batches: List[List[Dict[str, Any]]] = []

    @property
    def rows(self) -> List[Dict[str, Any]]:
        return [row for batch in self.batches for row in batch]

    def exists(self) -> bool:
        self.probes += 1
        return self.available

    def insert_rows(self, rows: Sequence[Mapping[str, Any]]) -> None:
        self.batches.append([copy.deepcopy(dict(row)) for row in rows])
