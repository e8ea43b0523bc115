"""Uniqueness resolution: suffix a slug until storage reports no match."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog

from slugkit.core.errors import InvalidScopeError, SlugCollisionError, SlugLengthError
from slugkit.core.slug import truncate
from slugkit.models.query import ExistenceQuery

logger = structlog.get_logger()

ExistsFn = Callable[[ExistenceQuery], bool]


def build_query(
    field: str,
    candidate: str,
    scope: Mapping[str, Any] | None = None,
    exclude_identity: Any | None = None,
    primary_key: str = "id",
) -> ExistenceQuery:
    """Build the base existence query for ``candidate``.

    Raises:
        InvalidScopeError: If ``scope`` references ``field``.
    """
    scope = dict(scope or {})
    if field in scope:
        raise InvalidScopeError(field)

    exclusions: dict[str, Any] = {}
    if exclude_identity is not None:
        exclusions[primary_key] = exclude_identity
    return ExistenceQuery(conditions={field: candidate, **scope}, exclusions=exclusions)


def resolve_unique_slug(
    candidate: str,
    *,
    exists: ExistsFn,
    field: str = "slug",
    scope: Mapping[str, Any] | None = None,
    exclude_identity: Any | None = None,
    primary_key: str = "id",
    max_length: int | None = None,
    separator: str = "-",
    max_attempts: int | None = None,
) -> str:
    """Return ``candidate``, or ``candidate`` plus the first free numeric suffix.

    Suffixes are ``separator + str(i)`` for i = 1, 2, ... . When a suffix
    pushes the slug past ``max_length``, the base is shortened (dropping a
    separator left dangling at the cut) and the suffix kept whole.

    Args:
        candidate: Normalized slug to test.
        exists: Existence check against storage; errors propagate unchanged.
        field: Slug field name used in the query.
        scope: Extra equality conditions narrowing the search.
        exclude_identity: Identity of the record being saved, excluded so it
            does not collide with its own stored slug.
        primary_key: Field holding the identity.
        max_length: Maximum length of the returned slug.
        separator: Separator placed before the numeric suffix.
        max_attempts: Number of suffixes to try. None means no limit.

    Returns:
        A slug that ``exists`` reported as free.

    Raises:
        InvalidScopeError: If ``scope`` references ``field``.
        SlugLengthError: If a suffix leaves no room for the base.
        SlugCollisionError: If ``max_attempts`` suffixes were all taken.
    """
    candidate = truncate(candidate, max_length)
    query = build_query(field, candidate, scope, exclude_identity, primary_key)

    i = 0
    suffix = ""
    while exists(query):
        logger.debug("slug_collision", slug=candidate + suffix, attempt=i)
        if max_attempts is not None and i >= max_attempts:
            raise SlugCollisionError(candidate, i)

        i += 1
        suffix = f"{separator}{i}"
        if max_length is not None and len(candidate) + len(suffix) > max_length:
            candidate = candidate[: max(max_length - len(suffix), 0)]
            # A cut can land right after a separator.
            while separator and candidate.endswith(separator):
                candidate = candidate[: -len(separator)]
            if not candidate:
                raise SlugLengthError(
                    suffix,
                    max_length,
                    f"Suffix '{suffix}' leaves no room for a slug within {max_length} chars",
                )
        query = query.with_condition(field, candidate + suffix)

    if suffix:
        logger.info("slug_resolved", slug=candidate + suffix, attempts=i)
    return candidate + suffix
