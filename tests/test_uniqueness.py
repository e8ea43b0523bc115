"""Tests for uniqueness resolution."""

import pytest

from slugkit.core.errors import (
    InvalidScopeError,
    PersistenceUnavailableError,
    SlugCollisionError,
    SlugLengthError,
)
from slugkit.models import ExistenceQuery
from slugkit.services.uniqueness import build_query, resolve_unique_slug


class _TakenSlugs:
    """Fake existence check that records every query it receives."""

    def __init__(self, taken):
        self.taken = set(taken)
        self.queries: list[ExistenceQuery] = []

    def __call__(self, query: ExistenceQuery) -> bool:
        self.queries.append(query)
        return query.conditions["slug"] in self.taken


class TestBuildQuery:
    """Tests for the base existence query."""

    def test_candidate_and_scope(self):
        query = build_query("slug", "hello", {"site_id": 3})
        assert query.conditions == {"slug": "hello", "site_id": 3}
        assert query.exclusions == {}

    def test_excludes_identity(self):
        """Test a persisted record is excluded from its own check."""
        query = build_query("slug", "hello", exclude_identity=7, primary_key="pk")
        assert query.exclusions == {"pk": 7}

    def test_scope_referencing_slug_field(self):
        with pytest.raises(InvalidScopeError, match="slug"):
            build_query("slug", "hello", {"slug": "other"})


class TestResolveUniqueSlug:
    """Tests for suffix resolution."""

    def test_no_collision_returns_candidate(self):
        exists = _TakenSlugs([])
        assert resolve_unique_slug("hello-world", exists=exists) == "hello-world"
        assert len(exists.queries) == 1

    def test_first_free_suffix(self):
        """Test the suffix counter stops at the first free value."""
        exists = _TakenSlugs(["post", "post-1", "post-2"])
        assert resolve_unique_slug("post", exists=exists) == "post-3"
        assert [q.conditions["slug"] for q in exists.queries] == [
            "post",
            "post-1",
            "post-2",
            "post-3",
        ]

    def test_custom_separator(self):
        exists = _TakenSlugs(["post"])
        assert resolve_unique_slug("post", exists=exists, separator="_") == "post_1"

    def test_scope_and_exclusion_kept_on_every_query(self):
        exists = _TakenSlugs(["post"])
        resolve_unique_slug("post", exists=exists, scope={"site_id": 1}, exclude_identity=9)
        for query in exists.queries:
            assert query.conditions["site_id"] == 1
            assert query.exclusions == {"id": 9}

    def test_truncates_base_to_fit_suffix(self):
        """Test the base is shortened so base + suffix stays within max_length."""
        taken = ["abcdefghij", "abcdefg-10", "abcdefg-11"]
        taken += [f"abcdefgh-{i}" for i in range(1, 10)]
        exists = _TakenSlugs(taken)
        result = resolve_unique_slug("abcdefghij", exists=exists, max_length=10)
        assert result == "abcdefg-12"
        assert len(result) <= 10

    def test_overlong_candidate_truncated(self):
        exists = _TakenSlugs([])
        assert resolve_unique_slug("abcdefghijkl", exists=exists, max_length=10) == "abcdefghij"

    def test_multibyte_truncation(self):
        """Test truncation counts characters, not bytes."""
        exists = _TakenSlugs(["ééééé"])
        assert resolve_unique_slug("ééééé", exists=exists, max_length=5) == "ééé-1"

    def test_cut_after_separator_is_stripped(self):
        """Test truncation for the suffix does not leave a doubled separator."""
        exists = _TakenSlugs(["hello-wo"])
        assert resolve_unique_slug("hello-wo", exists=exists, max_length=8) == "hello-1"

    def test_suffix_longer_than_max_length(self):
        exists = _TakenSlugs(["ab"])
        with pytest.raises(SlugLengthError):
            resolve_unique_slug("ab", exists=exists, max_length=2)

    def test_max_attempts(self):
        """Test resolution gives up after the configured number of suffixes."""
        exists = _TakenSlugs(["post", "post-1", "post-2"])
        with pytest.raises(SlugCollisionError) as exc_info:
            resolve_unique_slug("post", exists=exists, max_attempts=2)
        assert exc_info.value.attempts == 2
        assert len(exists.queries) == 3

    def test_max_attempts_not_reached(self):
        exists = _TakenSlugs(["post", "post-1"])
        assert resolve_unique_slug("post", exists=exists, max_attempts=2) == "post-2"

    def test_invalid_scope(self):
        with pytest.raises(InvalidScopeError):
            resolve_unique_slug("post", exists=_TakenSlugs([]), scope={"slug": "x"})

    def test_persistence_errors_propagate(self):
        """Test storage failures surface without retries."""
        calls = []

        def _unavailable(query):
            calls.append(query)
            raise PersistenceUnavailableError("database is down")

        with pytest.raises(PersistenceUnavailableError):
            resolve_unique_slug("post", exists=_unavailable)
        assert len(calls) == 1
