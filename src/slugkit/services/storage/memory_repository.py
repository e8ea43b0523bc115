"""In-memory existence checks over a list of rows."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from slugkit.models.query import ExistenceQuery


@dataclass
class MemoryRepository:
    """Rows kept as plain dicts; useful for tests and previews."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    column_lengths: dict[str, int] = field(default_factory=dict)

    def add(self, row: Mapping[str, Any]) -> dict[str, Any]:
        stored = dict(row)
        self.rows.append(stored)
        return stored

    def exists(self, query: ExistenceQuery) -> bool:
        return any(query.matches(row) for row in self.rows)

    def column_length(self, name: str) -> int | None:
        return self.column_lengths.get(name)
