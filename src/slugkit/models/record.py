"""Record abstraction consumed by slug computation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Record(Protocol):
    """Protocol for records that can be slugged.

    Implementations expose field values, per-field validation state and
    the bits of lifecycle state that decide whether a slug is generated.
    """

    def get(self, field: str, default: Any = None) -> Any:
        """Return the current value of ``field``."""
        ...

    def has_error(self, field: str) -> bool:
        """Return True if ``field`` currently holds a validation error."""
        ...

    def is_new(self) -> bool:
        """Return True if the record has never been persisted."""
        ...

    def is_dirty(self, field: str) -> bool:
        """Return True if ``field`` was explicitly set since load."""
        ...

    def identity(self) -> Any | None:
        """Return the persisted identity, or None for new records."""
        ...


class Entity:
    """In-memory record with dirty tracking and a validation-result map."""

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        new: bool = True,
        primary_key: str = "id",
        errors: Mapping[str, list[str]] | None = None,
    ) -> None:
        self._data: dict[str, Any] = dict(data or {})
        self._new = new
        self._dirty: set[str] = set(self._data) if new else set()
        self.primary_key = primary_key
        self.errors: dict[str, list[str]] = {k: list(v) for k, v in (errors or {}).items()}

    def __repr__(self) -> str:
        state = "new" if self._new else "persisted"
        return f"Entity({self._data!r}, {state})"

    def get(self, field: str, default: Any = None) -> Any:
        return self._data.get(field, default)

    def set(self, field: str, value: Any) -> None:
        self._data[field] = value
        self._dirty.add(field)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def has_error(self, field: str) -> bool:
        return bool(self.errors.get(field))

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def is_new(self) -> bool:
        return self._new

    def is_dirty(self, field: str) -> bool:
        return field in self._dirty

    def clean(self) -> None:
        """Forget which fields were set, as after a load or save."""
        self._dirty.clear()

    def identity(self) -> Any | None:
        return self._data.get(self.primary_key)

    def mark_persisted(self, identity: Any | None = None) -> None:
        """Flag the record as saved, optionally assigning its identity."""
        if identity is not None:
            self._data[self.primary_key] = identity
        self._new = False
        self.clean()
