"""Existence checks against a SQL table through SQLModel."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import Column, MetaData, Table, func
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from slugkit.core.errors import ConfigurationError, PersistenceUnavailableError

from .repository import SessionRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from slugkit.models.query import ExistenceQuery

logger = structlog.get_logger()


class SQLRepository(SessionRepository[Any]):
    """Answer existence queries with a single ``SELECT count(*)`` per call."""

    def __init__(self, engine: Engine, table: Table) -> None:
        super().__init__(engine)
        self.table = table

    @classmethod
    def from_model(cls, engine: Engine, model: type[SQLModel]) -> SQLRepository:
        """Build a repository for a SQLModel table class."""
        table = getattr(model, "__table__", None)
        if table is None:
            raise ConfigurationError(
                f"{model.__name__} is not a table model",
                "Declare it with 'class MyModel(SQLModel, table=True)'.",
            )
        return cls(engine, table)

    @classmethod
    def reflect(cls, engine: Engine, table_name: str) -> SQLRepository:
        """Build a repository by reflecting an existing table."""
        try:
            table = Table(table_name, MetaData(), autoload_with=engine)
        except NoSuchTableError as e:
            raise ConfigurationError(f"Table '{table_name}' does not exist") from e
        except SQLAlchemyError as e:
            raise PersistenceUnavailableError(f"Database error: {e}") from e
        return cls(engine, table)

    def _column(self, name: str) -> Column[Any]:
        try:
            return self.table.c[name]
        except KeyError:
            raise ConfigurationError(
                f"Table '{self.table.name}' has no column '{name}'",
                f"Available columns: {', '.join(self.table.c.keys())}",
            ) from None

    def exists(self, query: ExistenceQuery) -> bool:
        """Return True if any row matches the query."""
        clauses = [self._column(name) == value for name, value in query.conditions.items()]
        clauses += [self._column(name) != value for name, value in query.exclusions.items()]
        statement = select(func.count()).select_from(self.table).where(*clauses)

        def _count(session: Session) -> int:
            return session.exec(statement).one()

        count = self._run_session(_count)
        logger.debug("slug_exists_query", table=self.table.name, matches=count)
        return count > 0

    def column_length(self, name: str) -> int | None:
        """Return the declared string length of a column, if any."""
        return getattr(self._column(name).type, "length", None)
