"""Slug computation for raw text and records."""

from __future__ import annotations

import structlog

from slugkit.core.config import SlugConfig
from slugkit.core.errors import ConfigurationError, IncompleteSourceError, SlugLengthError
from slugkit.core.slug import SlugGenerator, Slugger, ensure_slugger, get_slugger
from slugkit.models.query import ExistenceQuery
from slugkit.models.record import Record
from slugkit.services.storage import ExistenceChecker
from slugkit.services.uniqueness import build_query, resolve_unique_slug

logger = structlog.get_logger()


class SlugService:
    """Compute slugs from records or free text.

    Handles:
    - Joining configured source fields and applying replacements
    - Normalizing through the configured slugger
    - Resolving collisions against the repository (default or custom resolver)
    """

    def __init__(
        self,
        config: SlugConfig | None = None,
        repository: ExistenceChecker | None = None,
        slugger: Slugger | None = None,
    ) -> None:
        """Initialize slug service.

        Args:
            config: Slug configuration. Defaults to ``SlugConfig()``.
            repository: Existence-check collaborator. Needed to slug records
                when ``config.unique == "default"``; free text never uses it.
            slugger: Normalizer instance. Overrides ``config.slugger``.

        Raises:
            ConfigurationError: If the slugger or repository is unusable.
        """
        config = config or SlugConfig()
        if repository is not None and not isinstance(repository, ExistenceChecker):
            raise ConfigurationError(
                f"Repository {repository!r} has no 'exists(query)' method",
            )

        if config.max_length is None and repository is not None:
            column_length = getattr(repository, "column_length", None)
            length = column_length(config.field) if column_length is not None else None
            if length:
                config = config.with_overrides(max_length=length)

        self.config = config
        self.repository = repository
        self.slugger = get_slugger(config.slugger) if slugger is None else ensure_slugger(slugger)
        self.generator = SlugGenerator(
            self.slugger,
            separator=config.separator,
            replacements=config.replacements,
            max_length=config.max_length,
        )

    def slug(self, value: str | Record, separator: str | None = None) -> str:
        """Generate a slug for a record or for free text.

        Free text is only normalized, never checked for uniqueness. For a
        persisted record whose slug field was set by the caller, the current
        slug is returned untouched.

        Args:
            value: Record or raw text.
            separator: Overrides the configured separator.

        Returns:
            The slug.

        Raises:
            IncompleteSourceError: If a source field is unset, invalid, or
                the joined text normalizes to nothing.
            ConfigurationError: If default uniqueness is on and no
                repository was given.
            SlugLengthError: If a custom resolver returns a slug longer
                than ``max_length``.
        """
        sep = self.config.separator if separator is None else separator
        if isinstance(value, str):
            return self.generator.slugify(value, sep)

        record = value
        if not record.is_new() and record.is_dirty(self.config.field):
            return record.get(self.config.field)

        slug = self.generator.slugify(self._source_text(record, sep), sep)
        if not slug:
            raise IncompleteSourceError(
                ", ".join(self.config.source_fields), "does not produce any slug characters"
            )
        return self._make_unique(record, slug, sep)

    def apply(self, record: Record) -> str | None:
        """Set the slug field on a new record unless the caller already set it.

        Returns:
            The slug written, or None if the record was skipped.
        """
        field = self.config.field
        if not record.is_new() or record.is_dirty(field):
            return None

        slug = self.slug(record)
        record.set(field, slug)
        logger.debug("slug_applied", field=field, slug=slug)
        return slug

    def lookup_query(self, slug: str) -> ExistenceQuery:
        """Build the query that finds a record by slug within the scope."""
        if not slug:
            msg = "A slug is required to build a lookup query"
            raise ValueError(msg)
        return build_query(self.config.field, slug, self.config.scope_conditions)

    def _source_text(self, record: Record, separator: str) -> str:
        parts: list[str] = []
        for field in self.config.source_fields:
            if record.has_error(field):
                raise IncompleteSourceError(field, "has validation errors")
            value = record.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise IncompleteSourceError(field)
            parts.append(str(value))
        return separator.join(parts)

    def _make_unique(self, record: Record, slug: str, separator: str) -> str:
        config = self.config
        if config.unique == "disabled":
            return slug
        if config.unique == "custom":
            resolved = config.resolver(record, slug, separator)
            if config.max_length is not None and len(resolved) > config.max_length:
                raise SlugLengthError(resolved, config.max_length)
            return resolved

        if self.repository is None:
            raise ConfigurationError(
                "Default uniqueness needs a repository with an 'exists(query)' method",
                "Pass a repository, or set unique to 'disabled' or 'custom'.",
            )
        return resolve_unique_slug(
            slug,
            exists=self.repository.exists,
            field=config.field,
            scope=config.scope_conditions,
            exclude_identity=record.identity(),
            primary_key=config.primary_key,
            max_length=config.max_length,
            separator=separator,
            max_attempts=config.max_attempts,
        )


def compute_slug(
    value: str | Record,
    config: SlugConfig | None = None,
    repository: ExistenceChecker | None = None,
    separator: str | None = None,
) -> str:
    """One-shot helper around ``SlugService.slug``."""
    return SlugService(config, repository).slug(value, separator)

