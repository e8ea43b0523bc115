"""Core configuration and utilities for slugkit."""

from slugkit.core.config import (
    DEFAULT_REPLACEMENTS,
    SlugConfig,
    UniqueResolver,
    load_config,
)
from slugkit.core.errors import (
    ConfigurationError,
    IncompleteSourceError,
    InvalidScopeError,
    InvalidSluggerError,
    PersistenceUnavailableError,
    SlugCollisionError,
    SlugError,
    SlugLengthError,
    UnknownSluggerError,
)
from slugkit.core.slug import (
    AsciiSlugger,
    SlugGenerator,
    Slugger,
    UnidecodeSlugger,
    apply_replacements,
    available_sluggers,
    get_slugger,
    register_slugger,
    truncate,
)

__all__ = [
    "DEFAULT_REPLACEMENTS",
    "AsciiSlugger",
    "SlugConfig",
    "SlugGenerator",
    "Slugger",
    "UniqueResolver",
    "UnidecodeSlugger",
    "apply_replacements",
    "available_sluggers",
    "get_slugger",
    "load_config",
    "register_slugger",
    "truncate",
    "ConfigurationError",
    "IncompleteSourceError",
    "InvalidScopeError",
    "InvalidSluggerError",
    "PersistenceUnavailableError",
    "SlugCollisionError",
    "SlugError",
    "SlugLengthError",
    "UnknownSluggerError",
]
