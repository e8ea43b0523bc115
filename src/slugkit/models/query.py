"""Existence query submitted to the persistence layer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ExistenceQuery:
    """Equality conditions plus "not equal" exclusions.

    A row matches when every condition equals and no exclusion equals.
    """

    conditions: Mapping[str, Any] = field(default_factory=dict)
    exclusions: Mapping[str, Any] = field(default_factory=dict)

    def with_condition(self, name: str, value: Any) -> ExistenceQuery:
        """Return a copy with condition ``name`` set to ``value``."""
        return replace(self, conditions={**self.conditions, name: value})

    def matches(self, row: Mapping[str, Any]) -> bool:
        for name, value in self.conditions.items():
            if name not in row or row[name] != value:
                return False
        return all(row.get(name) != value for name, value in self.exclusions.items())

    @property
    def fields(self) -> set[str]:
        return set(self.conditions) | set(self.exclusions)
