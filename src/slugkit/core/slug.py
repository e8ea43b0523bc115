"""Slug normalizers and the text pipeline that feeds them."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

from slugify import slugify as _unidecode_slugify

from slugkit.core.errors import InvalidSluggerError, UnknownSluggerError

DEFAULT_SEPARATOR = "-"
DEFAULT_SLUGGER = "ascii"

_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")


@runtime_checkable
class Slugger(Protocol):
    """Protocol for text normalizers.

    Implementations must return only lowercase ASCII letters, digits and the
    separator, collapse runs of anything else into a single separator, and
    never start or end with the separator. They must be pure, so that
    ``slug(slug(text, sep), sep) == slug(text, sep)``.
    """

    def slug(self, text: str, separator: str = DEFAULT_SEPARATOR) -> str:
        """Return a URL-safe version of ``text``.

        Args:
            text: Original string.
            separator: String placed between words.

        Returns:
            The normalized slug.
        """
        ...


class AsciiSlugger:
    """Decompose accents and drop anything outside ``[a-z0-9]``."""

    def slug(self, text: str, separator: str = DEFAULT_SEPARATOR) -> str:
        normalized = unicodedata.normalize("NFKD", text)
        ascii_text = normalized.encode("ascii", "ignore").decode("ascii").lower()
        return separator.join(token for token in _TOKEN_SPLIT.split(ascii_text) if token)


class UnidecodeSlugger:
    """Transliterate non-Latin text (``"Straße"`` -> ``"strasse"``) via python-slugify."""

    def slug(self, text: str, separator: str = DEFAULT_SEPARATOR) -> str:
        return _unidecode_slugify(text, separator=separator)


_SLUGGERS: dict[str, Slugger] = {
    "ascii": AsciiSlugger(),
    "unidecode": UnidecodeSlugger(),
}


def ensure_slugger(slugger: Any) -> Slugger:
    """Check that ``slugger`` satisfies the Slugger protocol.

    Raises:
        InvalidSluggerError: If it has no callable ``slug`` method.
    """
    if not isinstance(slugger, Slugger) or not callable(slugger.slug):
        raise InvalidSluggerError(slugger)
    return slugger


def register_slugger(name: str, slugger: Slugger, *, replace: bool = False) -> None:
    """Register a slugger under ``name`` so configs can select it."""
    if name in _SLUGGERS and not replace:
        msg = f"Slugger '{name}' is already registered"
        raise ValueError(msg)
    _SLUGGERS[name] = ensure_slugger(slugger)


def get_slugger(name: str) -> Slugger:
    """Look up a registered slugger by name."""
    try:
        return _SLUGGERS[name]
    except KeyError:
        raise UnknownSluggerError(name, available_sluggers()) from None


def available_sluggers() -> list[str]:
    return sorted(_SLUGGERS)


@lru_cache(maxsize=64)
def _replacement_pattern(keys: tuple[str, ...]) -> re.Pattern[str]:
    # Alternation is tried left to right, so earlier keys win at each position.
    return re.compile("|".join(re.escape(key) for key in keys))


def apply_replacements(
    text: str, replacements: Mapping[str, str] | Iterable[tuple[str, str]]
) -> str:
    """Substitute literal substrings in a single left-to-right pass.

    At each position the first entry (in order) that matches is used and
    the scan resumes after the matched text, so replacements never overlap
    and replaced output is never rescanned.

    Args:
        text: Raw source text.
        replacements: Ordered mapping (or pairs) of literal -> replacement.

    Returns:
        The text with replacements applied.
    """
    if isinstance(replacements, Mapping):
        replacements = replacements.items()
    pairs = list(replacements)
    if not pairs:
        return text

    lookup: dict[str, str] = {}
    for key, value in pairs:
        lookup.setdefault(key, value)
    pattern = _replacement_pattern(tuple(lookup))
    return pattern.sub(lambda match: lookup[match.group(0)], text)


def truncate(value: str, max_length: int | None) -> str:
    """Truncate a value to ``max_length`` characters. ``None`` disables truncation."""
    if max_length is None or len(value) <= max_length:
        return value
    return value[:max_length]


class SlugGenerator:
    """Run raw text through replacements, a slugger and truncation.

    This is the text-only half of slug computation; it never touches
    storage, so it is safe for ad-hoc previews.
    """

    def __init__(
        self,
        slugger: Slugger | None = None,
        *,
        separator: str = DEFAULT_SEPARATOR,
        replacements: Mapping[str, str] | Iterable[tuple[str, str]] = (),
        max_length: int | None = None,
    ) -> None:
        """Initialize slug generator.

        Args:
            slugger: Normalizer to use. Defaults to the registered "ascii" slugger.
            separator: Default separator between words.
            replacements: Literal substitutions applied before normalizing.
            max_length: Maximum slug length. Use None to disable truncation.
        """
        if slugger is None:
            slugger = get_slugger(DEFAULT_SLUGGER)
        self.slugger = ensure_slugger(slugger)
        self.separator = separator
        self.replacements = tuple(
            replacements.items() if isinstance(replacements, Mapping) else replacements
        )
        self.max_length = max_length

    def slugify(self, value: str, separator: str | None = None) -> str:
        """Generate a URL-safe slug from free text."""
        sep = self.separator if separator is None else separator
        replaced = apply_replacements(value, self.replacements)
        slug = self.truncate(self.slugger.slug(replaced, sep))
        # A cut can land right after a separator.
        while sep and slug.endswith(sep):
            slug = slug[: -len(sep)]
        return slug

    def truncate(self, value: str) -> str:
        """Truncate a value to the configured max length."""
        return truncate(value, self.max_length)
