"""Existence-check protocol and shared SQLModel session helpers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar, runtime_checkable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from slugkit.core.errors import PersistenceUnavailableError

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from slugkit.models.query import ExistenceQuery

T = TypeVar("T")


@runtime_checkable
class ExistenceChecker(Protocol):
    """Persistence collaborator used by uniqueness resolution."""

    def exists(self, query: ExistenceQuery) -> bool:
        """Return True if any stored row matches ``query``."""
        ...


class SessionRepository(Generic[T]):
    """Run SQLModel session work and translate driver failures."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def _run_session(self, fn: Callable[[Session], T]) -> T:
        """Run a function inside a Session.

        Raises:
            PersistenceUnavailableError: If the database call fails.
        """
        try:
            with Session(self._engine) as session:
                return fn(session)
        except SQLAlchemyError as e:
            raise PersistenceUnavailableError(f"Database error: {e}") from e
