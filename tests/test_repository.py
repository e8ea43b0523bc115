"""Tests for the memory and SQL existence-check repositories."""

import pytest
from sqlalchemy import text
from sqlmodel import Field, Session, SQLModel, create_engine

from slugkit.core.config import SlugConfig
from slugkit.core.errors import ConfigurationError, PersistenceUnavailableError
from slugkit.models import Entity, ExistenceQuery
from slugkit.services import SlugService
from slugkit.services.storage import ExistenceChecker, MemoryRepository, SQLRepository


class Article(SQLModel, table=True):
    """Test table with a bounded slug column."""

    id: int | None = Field(default=None, primary_key=True)
    title: str
    slug: str = Field(max_length=12, index=True)
    site_id: int = 1


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'articles.db'}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded_engine(engine):
    with Session(engine) as session:
        session.add(Article(id=1, title="Hello", slug="hello", site_id=1))
        session.add(Article(id=2, title="Hello", slug="hello-1", site_id=1))
        session.add(Article(id=3, title="Hello", slug="hello", site_id=2))
        session.commit()
    return engine


class TestMemoryRepository:
    """Tests for MemoryRepository."""

    def test_is_existence_checker(self):
        assert isinstance(MemoryRepository(), ExistenceChecker)

    def test_exists(self):
        repository = MemoryRepository()
        repository.add({"id": 1, "slug": "hello"})
        assert repository.exists(ExistenceQuery(conditions={"slug": "hello"}))
        assert not repository.exists(ExistenceQuery(conditions={"slug": "other"}))
        assert not repository.exists(
            ExistenceQuery(conditions={"slug": "hello"}, exclusions={"id": 1})
        )

    def test_add_copies_row(self):
        repository = MemoryRepository()
        row = {"slug": "a"}
        repository.add(row)
        row["slug"] = "b"
        assert repository.rows == [{"slug": "a"}]

    def test_column_length(self):
        repository = MemoryRepository(column_lengths={"slug": 20})
        assert repository.column_length("slug") == 20
        assert repository.column_length("title") is None


class TestSQLRepository:
    """Tests for SQLRepository against SQLite."""

    def test_exists(self, seeded_engine):
        repository = SQLRepository.from_model(seeded_engine, Article)
        assert repository.exists(ExistenceQuery(conditions={"slug": "hello"}))
        assert not repository.exists(ExistenceQuery(conditions={"slug": "hello-2"}))

    def test_scope_and_exclusions(self, seeded_engine):
        repository = SQLRepository.from_model(seeded_engine, Article)
        assert repository.exists(ExistenceQuery(conditions={"slug": "hello", "site_id": 2}))
        assert not repository.exists(
            ExistenceQuery(conditions={"slug": "hello-1", "site_id": 2})
        )
        assert not repository.exists(
            ExistenceQuery(conditions={"slug": "hello", "site_id": 2}, exclusions={"id": 3})
        )

    def test_reflect(self, seeded_engine):
        repository = SQLRepository.reflect(seeded_engine, "article")
        assert repository.exists(ExistenceQuery(conditions={"slug": "hello-1"}))

    def test_reflect_missing_table(self, engine):
        with pytest.raises(ConfigurationError, match="does not exist"):
            SQLRepository.reflect(engine, "missing")

    def test_unknown_column(self, engine):
        repository = SQLRepository.from_model(engine, Article)
        with pytest.raises(ConfigurationError, match="no column 'nope'"):
            repository.exists(ExistenceQuery(conditions={"nope": 1}))

    def test_from_non_table_model(self, engine):
        class NotATable(SQLModel):
            name: str

        with pytest.raises(ConfigurationError, match="not a table model"):
            SQLRepository.from_model(engine, NotATable)

    def test_column_length(self, engine):
        repository = SQLRepository.from_model(engine, Article)
        assert repository.column_length("slug") == 12
        assert repository.column_length("id") is None

    def test_database_errors_are_wrapped(self, engine):
        """Test driver failures surface as PersistenceUnavailableError."""
        repository = SQLRepository.from_model(engine, Article)
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE article"))
        with pytest.raises(PersistenceUnavailableError):
            repository.exists(ExistenceQuery(conditions={"slug": "hello"}))


class TestServiceWithSQL:
    """End-to-end slugging against a SQLite table."""

    def test_unique_slug(self, seeded_engine):
        repository = SQLRepository.from_model(seeded_engine, Article)
        service = SlugService(SlugConfig(scope={"site_id": 1}), repository)
        assert service.slug(Entity({"title": "Hello"})) == "hello-2"

    def test_scope_isolates_sites(self, seeded_engine):
        repository = SQLRepository.from_model(seeded_engine, Article)
        service = SlugService(SlugConfig(scope={"site_id": 3}), repository)
        assert service.slug(Entity({"title": "Hello"})) == "hello"

    def test_column_length_bounds_slug(self, seeded_engine):
        """Test the column's declared length caps the slug."""
        repository = SQLRepository.from_model(seeded_engine, Article)
        service = SlugService(SlugConfig(), repository)
        result = service.slug(Entity({"title": "A very long article title"}))
        assert result == "a-very-long"
        assert len(result) <= 12
